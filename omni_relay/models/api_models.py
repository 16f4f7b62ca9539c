from pydantic import BaseModel
from typing import List, Any, Optional

# --- Inbound bodies ---
# Fields are untyped; the handlers do the truthiness and presence checks
# themselves so the error bodies stay fixed.

class GeminiProxyRequest(BaseModel):
    prompt: Optional[Any] = None
    model_config = {"extra": "allow"}


class Judge0ProxyRequest(BaseModel):
    language_id: Optional[Any] = None
    source_code: Optional[Any] = None
    model_config = {"extra": "allow"}

    @property
    def has_source_code(self) -> bool:
        # "" and null both count as present; only a missing key is rejected
        return "source_code" in self.model_fields_set


# --- Outbound payloads ---

class GeminiTextPart(BaseModel):
    text: Any


class GeminiContent(BaseModel):
    parts: List[GeminiTextPart]


class GeminiGenerateContentPayload(BaseModel):
    contents: List[GeminiContent]

    @classmethod
    def from_prompt(cls, prompt: Any) -> "GeminiGenerateContentPayload":
        return cls(contents=[GeminiContent(parts=[GeminiTextPart(text=prompt)])])


class Judge0SubmissionPayload(BaseModel):
    language_id: Any
    source_code: Any


# --- Responses ---

class GeminiProxyResponse(BaseModel):
    # Relayed as extracted; Gemini sends a string but other shapes pass through
    text: Any = ""


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    detail: str
    app_version: str
    gemini_configured: bool
    judge0_configured: bool
