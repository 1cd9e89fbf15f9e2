"""
Transpiler - Compile JSX component source into ES5 the sandbox can run.
"""

import logging
import re
from typing import Optional

from livepreview.errors import TranspileError
from livepreview.transpiler.loader import TranspilerLoader, get_loader


logger = logging.getLogger(__name__)


# The sandbox interpreter is ES5 only, so ES2015 syntax is lowered with JSX.
BABEL_PRESETS = ["es2015", "react"]
VIRTUAL_FILENAME = "preview.jsx"

# Textual, not brace-aware: multi-line or nested-brace style blocks survive.
INLINE_STYLE_PATTERN = re.compile(r"style=\{\{.*?\}\}")


def strip_inline_styles(source: str) -> str:
    """Remove ``style={{...}}`` attribute assignments from single lines of source."""
    return INLINE_STYLE_PATTERN.sub("", source)


class Transpiler:
    """Compiles component source with the handle provided by a TranspilerLoader."""

    def __init__(self, loader: Optional[TranspilerLoader] = None):
        self.loader = loader or get_loader()

    async def transpile(self, source: str, strip_styles: bool = False) -> str:
        """
        Compile component source.

        Args:
            source: JSX component source
            strip_styles: Strip inline style attributes before compiling

        Returns:
            Compiled JavaScript text

        Raises:
            LoadError: If the compiler could not be acquired
            TranspileError: If the source does not compile
        """
        compiler = await self.loader.ensure_ready()

        if strip_styles:
            source = strip_inline_styles(source)

        try:
            return compiler.transform(source, presets=BABEL_PRESETS, filename=VIRTUAL_FILENAME)
        except Exception as e:
            logger.debug("Transpilation failed: %s", e)
            raise TranspileError(f"Error during transpilation: {_diagnostic(e)}") from e


def _diagnostic(exc: Exception) -> str:
    """Pull the compiler's message out of an interpreter error."""
    message = str(exc).strip()
    # dukpy prefixes the JS error name and appends a stack trace
    first_line = message.splitlines()[0] if message else exc.__class__.__name__
    return first_line
