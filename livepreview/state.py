"""
State definitions: the render graph state and the session snapshot store.
"""

from typing import Any, Callable, Dict, Optional, TypedDict, Union

from livepreview.schemas import RenderedPreview, Session, Status


class RenderState(TypedDict, total=False):
    """
    Typed state dictionary for the render graph.

    This state is passed between nodes and updated as the graph executes.
    """
    # Inputs
    source_code: str
    strip_inline_styles: bool
    properties: Dict[str, Any]

    # Intermediate artifact
    compiled: Optional[str]

    # Outputs
    preview: Optional[RenderedPreview]
    status: Status
    error: Optional[str]


def create_initial_state(
    source_code: str,
    strip_inline_styles: bool = False,
    properties: Optional[Dict[str, Any]] = None,
) -> RenderState:
    """
    Create an initial state for the render graph.

    Args:
        source_code: Component source to compile
        strip_inline_styles: Whether to strip ``style={{...}}`` before compiling
        properties: Props the component is instantiated with

    Returns:
        Initialized RenderState
    """
    return RenderState(
        source_code=source_code,
        strip_inline_styles=strip_inline_styles,
        properties=dict(properties or {}),
        compiled=None,
        preview=None,
        status="loading",
        error=None,
    )


Updater = Union[Dict[str, Any], Callable[[Session], Dict[str, Any]]]


class SessionStore:
    """
    Holder of the latest Session snapshot.

    All writes go through ``update``: read the latest snapshot, compute the
    changes, swap in a new snapshot. Callbacks that finish after a newer
    snapshot exists therefore merge into it instead of overwriting it.
    """

    def __init__(self, initial: Session):
        self._snapshot = initial
        self._listeners = []

    @property
    def snapshot(self) -> Session:
        return self._snapshot

    def update(self, changes: Updater) -> Session:
        """Apply a dict of changes, or a function of the latest snapshot returning one."""
        current = self._snapshot
        if callable(changes):
            changes = changes(current)
        if not changes:
            return current
        self._snapshot = current.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._snapshot)
        return self._snapshot

    def subscribe(self, listener: Callable[[Session], None]) -> Callable[[], None]:
        """Register a callback invoked with every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
