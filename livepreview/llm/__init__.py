"""Assistant channel: streamed replacement source from the code assistant."""

from livepreview.llm.suggestion_client import (
    ASSISTANT_PATH,
    SYSTEM_PROMPT,
    SuggestionClient,
    build_request,
    validate_response,
)

__all__ = [
    "ASSISTANT_PATH",
    "SYSTEM_PROMPT",
    "SuggestionClient",
    "build_request",
    "validate_response",
]
