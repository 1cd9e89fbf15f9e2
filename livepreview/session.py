"""
Editor session: owns the Session snapshot and wires user actions to the
preview pipeline, the assistant client and the prompt store.
"""

import logging
from typing import Any, Dict, List, Optional

from livepreview.config import get_config
from livepreview.errors import EmptyInstruction, SuggestionError
from livepreview.examples import COMMON_PROMPTS
from livepreview.llm.suggestion_client import SuggestionClient
from livepreview.pipeline import PreviewPipeline
from livepreview.prompt_store import JsonFileStore, KeyValueStore, load_prompts, save_prompts
from livepreview.sandbox.executor import SandboxExecutor
from livepreview.schemas import Session
from livepreview.state import SessionStore
from livepreview.transpiler.babel import Transpiler
from livepreview.utils import Debouncer


logger = logging.getLogger(__name__)


# Fields reset whenever the source is replaced; re-arms the render trigger
_REARM = {"status": "idle", "error": None, "retry_count": 0}


class EditorSession:
    """
    One live editor: source, preview status, assistant updates and undo history.

    Args:
        initial_code: Source shown at mount
        preview_props: Props the rendered component is instantiated with
        no_inline_styles: Strip ``style={{...}}`` attributes before compiling
    """

    def __init__(
        self,
        initial_code: str,
        preview_props: Optional[Dict[str, Any]] = None,
        no_inline_styles: bool = False,
        *,
        transpiler: Optional[Transpiler] = None,
        executor: Optional[SandboxExecutor] = None,
        suggestion_client: Optional[SuggestionClient] = None,
        prompt_store: Optional[KeyValueStore] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.prompt_store = prompt_store if prompt_store is not None else JsonFileStore()
        self.store = SessionStore(Session(
            source_code=initial_code,
            prompt_history=load_prompts(self.prompt_store),
        ))
        self.pipeline = PreviewPipeline(
            self.store,
            transpiler=transpiler,
            executor=executor,
            properties=preview_props,
            strip_inline_styles=no_inline_styles,
        )
        self.suggestion_client = suggestion_client or SuggestionClient()

        if debounce_seconds is None:
            debounce_seconds = get_config().debounce_seconds
        self._instruction_debouncer = Debouncer(self.commit_instruction, debounce_seconds)

    @property
    def snapshot(self) -> Session:
        return self.store.snapshot

    @property
    def suggestions(self) -> List[str]:
        """Built-in prompts followed by the saved ones."""
        return COMMON_PROMPTS + self.snapshot.prompt_history

    async def start(self) -> Session:
        """Render the initial source."""
        await self.pipeline.maybe_render()
        return self.snapshot

    # =========================================================================
    # INSTRUCTION INPUT
    # =========================================================================

    def set_instruction(self, text: str) -> None:
        """Record keystroke input; committed after the quiet period."""
        self._instruction_debouncer.call(text)

    def commit_instruction(self, text: str) -> None:
        """Commit instruction text to the session immediately."""
        self.store.update({"assistant_prompt": text})

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def submit_instruction(self) -> bool:
        """
        Ask the assistant to rewrite the current source.

        A submission while another one is in flight is rejected: it returns
        False without contacting the assistant or touching state.

        Returns:
            True if the source was replaced
        """
        snapshot = self.snapshot
        if snapshot.is_updating:
            logger.warning("Assistant update already in progress; submission rejected")
            return False

        instruction = snapshot.assistant_prompt
        if not instruction.strip():
            self._record_failure(EmptyInstruction())
            return False

        self.store.update({"is_updating": True, "error": None, "streaming_buffer": ""})
        try:
            new_code = await self.suggestion_client.request_update(
                snapshot.source_code,
                instruction,
                on_progress=self._on_stream_progress,
            )
        except SuggestionError as e:
            logger.info("Assistant update failed: %s", e)
            self._record_failure(e)
            return False

        self.store.update(lambda latest: {
            **_REARM,
            "undo_stack": latest.undo_stack + [latest.source_code],
            "source_code": new_code,
            "is_updating": False,
            "streaming_buffer": "",
        })
        await self.pipeline.maybe_render()
        return True

    async def undo(self) -> bool:
        """Restore the source from before the last assistant update."""
        if not self.snapshot.undo_stack:
            return False

        def pop(latest: Session) -> Dict[str, Any]:
            if not latest.undo_stack:
                return {}
            return {
                **_REARM,
                "source_code": latest.undo_stack[-1],
                "undo_stack": latest.undo_stack[:-1],
            }

        self.store.update(pop)
        await self.pipeline.maybe_render()
        return True

    async def edit_source_directly(self, new_text: str) -> Session:
        """Replace the source with user-typed text and re-render."""
        self.store.update({**_REARM, "source_code": new_text})
        await self.pipeline.maybe_render()
        return self.snapshot

    def save_prompt(self) -> List[str]:
        """Append the current instruction to the saved prompts."""
        instruction = self.snapshot.assistant_prompt
        save_prompts(self.prompt_store, load_prompts(self.prompt_store) + [instruction])
        snapshot = self.store.update(lambda latest: {
            "prompt_history": latest.prompt_history + [instruction],
        })
        return snapshot.prompt_history

    async def retry(self) -> bool:
        """Re-run the render cycle, subject to the retry ceiling."""
        return await self.pipeline.retry()

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _on_stream_progress(self, accumulated: str) -> None:
        self.store.update({"streaming_buffer": accumulated})

    def _record_failure(self, error: SuggestionError) -> None:
        self.store.update({
            "status": "error",
            "error": str(error),
            "is_updating": False,
            "streaming_buffer": "",
        })
