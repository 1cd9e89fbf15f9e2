"""
Assistant client that streams replacement component source.
"""

import logging
from typing import Callable, Optional

import esprima
import httpx

from livepreview.config import get_config
from livepreview.errors import EmptyInstruction, InvalidSyntax, TransportError, UnexpectedMarkup
from livepreview.schemas import ChatMessage, SuggestionRequest


logger = logging.getLogger(__name__)


ASSISTANT_PATH = "/integrations/anthropic-claude-sonnet-3-5/"

SYSTEM_PROMPT = """You are a code assistant. Follow these guidelines when responding:
1. Always return only the updated code, and avoid providing any explanations or extra text unless explicitly asked.
2. Use the syntax "module.exports = ComponentName;" at the end of the code. Do not use "export default".
3. Ensure the code is properly formatted and can be used directly in a Node.js/React environment.
4. Do not wrap the code in triple backticks unless explicitly requested by the user.
5. Respond with concise, minimal updates based on the user prompt.
6. If the user requests code modifications, return the full code with changes applied, formatted correctly for use."""


def build_request(current_source: str, instruction: str) -> SuggestionRequest:
    """Build the streamed request body for an instruction."""
    return SuggestionRequest(
        messages=[
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(
                role="user",
                content=f'Modify this React code: "{instruction}". Code:\n\n{current_source}',
            ),
        ],
        stream=True,
    )


def validate_response(text: str) -> str:
    """
    Check an accumulated assistant response and return the trimmed code.

    Raises:
        UnexpectedMarkup: If the response looks like an HTML page
        InvalidSyntax: If the response does not parse as a script
    """
    code = text.strip()

    # A leading "<" means an error page came back instead of code
    if code.startswith("<"):
        raise UnexpectedMarkup()

    try:
        esprima.parseScript(code, {"jsx": True})
    except Exception as e:
        raise InvalidSyntax(str(e) or e.__class__.__name__) from e

    return code


class SuggestionClient:
    """Client for the assistant endpoint's streamed text responses."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = get_config() if base_url is None or timeout is None else None
        self.base_url = base_url or config.assistant_base_url
        self.timeout = timeout if timeout is not None else config.request_timeout
        self._transport = transport

    async def request_update(
        self,
        current_source: str,
        instruction: str,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> str:
        """
        Ask the assistant to modify the source according to the instruction.

        Args:
            current_source: Component source to modify
            instruction: Natural-language instruction
            on_progress: Called with the accumulated text after every chunk

        Returns:
            The validated, trimmed replacement source

        Raises:
            EmptyInstruction: If the instruction is blank (no request is made)
            TransportError: On a non-2xx status or a network fault
            UnexpectedMarkup: If the response is an HTML page
            InvalidSyntax: If the response does not parse
        """
        if not instruction or not instruction.strip():
            raise EmptyInstruction()

        body = build_request(current_source, instruction).model_dump()
        logger.info("Requesting assistant update (%d chars of source)", len(current_source))

        accumulated = ""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                async with client.stream("POST", ASSISTANT_PATH, json=body) as response:
                    if not response.is_success:
                        raise TransportError(
                            f"AI API responded with status {response.status_code}",
                            status_code=response.status_code,
                        )
                    async for chunk in response.aiter_text():
                        if not chunk:
                            continue
                        accumulated += chunk
                        if on_progress:
                            on_progress(accumulated)
        except httpx.HTTPError as e:
            logger.warning("Assistant request failed: %s", e)
            raise TransportError(str(e) or e.__class__.__name__) from e

        logger.debug("Assistant stream complete (%d chars)", len(accumulated))
        return validate_response(accumulated)
