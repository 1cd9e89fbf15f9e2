"""
Preview pipeline: the render trigger, the render cycle and the retry policy.

Status transitions:
    idle -> loading -> ready | error
    error -> loading               (retry, at most MAX_RETRIES per episode)
    ready | error -> idle          (source replaced by the session, re-arms the trigger)
"""

import logging
from typing import Any, Dict, Optional

from livepreview.graph import get_compiled_graph
from livepreview.sandbox.executor import SandboxExecutor
from livepreview.schemas import Session
from livepreview.state import SessionStore, create_initial_state
from livepreview.transpiler.babel import Transpiler


logger = logging.getLogger(__name__)


MAX_RETRIES = 5


class PreviewPipeline:
    """Runs render cycles against a SessionStore."""

    def __init__(
        self,
        store: SessionStore,
        transpiler: Optional[Transpiler] = None,
        executor: Optional[SandboxExecutor] = None,
        properties: Optional[Dict[str, Any]] = None,
        strip_inline_styles: bool = False,
    ):
        self.store = store
        self.properties = dict(properties or {})
        self.strip_inline_styles = strip_inline_styles
        self._graph = get_compiled_graph(transpiler, executor)
        self._cycle = 0

    def should_render(self) -> bool:
        """A cycle may start only when idle, with source present and no assistant update in flight."""
        snapshot = self.store.snapshot
        return (
            snapshot.status == "idle"
            and bool(snapshot.source_code.strip())
            and not snapshot.is_updating
        )

    async def maybe_render(self) -> bool:
        """Run a render cycle if the trigger conditions hold."""
        if not self.should_render():
            return False
        await self.render()
        return True

    async def render(self) -> Session:
        """
        Run one full render cycle for the current source.

        The outcome is merged into the latest snapshot, and only while that
        snapshot still belongs to this cycle: same source, still ``loading``
        and no newer cycle started since.
        """
        self._cycle += 1
        cycle = self._cycle
        source = self.store.snapshot.source_code
        self.store.update({"status": "loading", "error": None})

        state = create_initial_state(
            source_code=source,
            strip_inline_styles=self.strip_inline_styles,
            properties=self.properties,
        )
        try:
            result = await self._graph.ainvoke(state)
        except Exception as e:
            logger.exception("Render cycle crashed")
            result = {"status": "error", "error": f"Render failed: {e}"}

        def merge(latest: Session) -> Dict[str, Any]:
            if cycle != self._cycle or latest.source_code != source or latest.status != "loading":
                logger.debug("Discarding superseded render result")
                return {}
            if result.get("status") == "ready":
                return {"status": "ready", "error": None, "preview": result.get("preview")}
            return {
                "status": "error",
                "error": result.get("error") or "Unknown render failure",
                "preview": None,
            }

        snapshot = self.store.update(merge)
        if snapshot.status == "error":
            logger.info("Render failed: %s", snapshot.error)
        else:
            logger.debug("Render finished with status %s", snapshot.status)
        return snapshot

    async def retry(self) -> bool:
        """
        Re-run the render cycle after an error.

        Returns:
            True if a cycle ran; False at the ceiling (the counter is reset and
            status stays ``error``) or when there is no error to retry.
        """
        snapshot = self.store.snapshot
        if snapshot.status != "error":
            return False

        if snapshot.retry_count >= MAX_RETRIES:
            logger.info("Retry ceiling of %d reached; resetting counter", MAX_RETRIES)
            self.store.update({"retry_count": 0})
            return False

        self.store.update(lambda latest: {"retry_count": latest.retry_count + 1})
        await self.render()
        return True
