"""Live component preview with assistant-driven edits."""

from livepreview.session import EditorSession

__all__ = ["EditorSession"]
