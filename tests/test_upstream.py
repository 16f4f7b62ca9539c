from __future__ import annotations

import asyncio
import json

import httpx

from omni_relay.services.upstream import (
    UpstreamFailure,
    UpstreamHttpError,
    UpstreamSuccess,
    post_json,
)


def _call(handler, **kwargs):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await post_json(
                client,
                "https://upstream.example/submit",
                payload={"a": 1},
                headers={"Content-Type": "application/json"},
                **kwargs,
            )

    return asyncio.run(run())


def test_success_parses_json():
    outcome = _call(lambda request: httpx.Response(201, json={"token": "abc"}))
    assert outcome == UpstreamSuccess(status_code=201, payload={"token": "abc"})


def test_request_carries_payload_and_params():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    _call(handler, params={"wait": "true"})
    assert seen[0].url.params["wait"] == "true"
    assert json.loads(seen[0].content) == {"a": 1}
    assert seen[0].headers["content-type"] == "application/json"


def test_http_error_keeps_raw_text():
    outcome = _call(lambda request: httpx.Response(503, text="upstream overloaded"))
    assert outcome == UpstreamHttpError(status_code=503, body_text="upstream overloaded")


def test_transport_error_is_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    outcome = _call(handler)
    assert isinstance(outcome, UpstreamFailure)
    assert isinstance(outcome.error, httpx.ConnectError)


def test_bad_json_is_failure():
    outcome = _call(lambda request: httpx.Response(200, text="not-json"))
    assert isinstance(outcome, UpstreamFailure)
