"""
Omni Relay: server-side proxies for the Gemini and Judge0 APIs.
"""
