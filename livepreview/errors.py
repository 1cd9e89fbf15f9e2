"""
Error taxonomy for the preview pipeline and the assistant channel.

Every external-call boundary (compiler fetch, compile call, sandbox run,
network call) converts its faults into one of these classes.
"""

from typing import Optional


class PreviewError(Exception):
    """Base class for all preview-engine failures."""
    pass


class LoadError(PreviewError):
    """Raised when the compiler resource cannot be fetched or initialized."""
    pass


class TranspileError(PreviewError):
    """Raised when component source fails to compile."""
    pass


class ComponentRuntimeError(PreviewError):
    """Raised when compiled source throws or yields no usable component export."""
    pass


class SuggestionError(PreviewError):
    """Base class for assistant update failures."""
    pass


class EmptyInstruction(SuggestionError):
    """Raised when the instruction is blank; the assistant is never contacted."""

    def __init__(self, message: str = "Please enter a prompt for the AI"):
        super().__init__(message)


class UnexpectedMarkup(SuggestionError):
    """Raised when the assistant returned an HTML page instead of code."""

    def __init__(self, message: str = "AI update failed: Received HTML instead of JavaScript. There may be a server issue."):
        super().__init__(message)


class InvalidSyntax(SuggestionError):
    """Raised when the assistant response does not parse as a script."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            f"AI response contains invalid JavaScript code: {detail}. Try refining the prompt."
        )


class TransportError(SuggestionError):
    """Raised on a non-success response status or a network fault."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"AI update failed: {detail}")
