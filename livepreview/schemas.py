"""
Pydantic schemas for session state, previews and assistant requests.
"""

from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


Status = Literal["idle", "loading", "ready", "error"]


class RenderedPreview(BaseModel):
    """Output of one render cycle."""
    model_config = ConfigDict(frozen=True)

    html: str = Field(..., description="Serialized markup of the rendered component")
    tree: Any = Field(None, description="Host-element tree returned by the sandbox")


class Session(BaseModel):
    """
    Complete editor state.

    Instances are frozen: every change produces a new snapshot via
    ``model_copy(update=...)`` inside ``SessionStore.update``.
    """
    model_config = ConfigDict(frozen=True)

    source_code: str = Field(..., description="Current component source")
    status: Status = Field("idle", description="Preview status")
    error: Optional[str] = Field(None, description="Current human-readable error")
    preview: Optional[RenderedPreview] = Field(None, description="Last successful render")
    streaming_buffer: str = Field("", description="Accumulated assistant output while streaming")
    assistant_prompt: str = Field("", description="Committed instruction text")
    is_updating: bool = Field(False, description="Whether an assistant update is in flight")
    retry_count: int = Field(0, description="Retries issued in the current error episode")
    prompt_history: List[str] = Field(default_factory=list, description="Saved prompts")
    undo_stack: List[str] = Field(default_factory=list, description="Prior sources, most recent last")


class ChatMessage(BaseModel):
    """A single message sent to the assistant endpoint."""
    role: Literal["system", "user", "assistant"] = Field(..., description="Role of the speaker")
    content: str = Field(..., description="Message content")


class SuggestionRequest(BaseModel):
    """Body of the streamed assistant request."""
    messages: List[ChatMessage] = Field(..., description="System directive followed by the user message")
    stream: bool = Field(True, description="Always request a streamed response")
