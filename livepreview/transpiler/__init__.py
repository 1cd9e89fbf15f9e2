"""
Transpiler module: compile JSX component source with Babel standalone.

Components:
- loader: Fetch the compiler once and share the handle (single-flight)
- babel: Strip inline styles and compile with the fixed presets
"""

from livepreview.transpiler.loader import (
    BabelCompiler,
    CompilerHandle,
    TranspilerLoader,
    babel_from_url,
    get_loader,
)
from livepreview.transpiler.babel import (
    BABEL_PRESETS,
    VIRTUAL_FILENAME,
    Transpiler,
    strip_inline_styles,
)

__all__ = [
    # Loader
    "BabelCompiler",
    "CompilerHandle",
    "TranspilerLoader",
    "babel_from_url",
    "get_loader",
    # Transpiler
    "BABEL_PRESETS",
    "VIRTUAL_FILENAME",
    "Transpiler",
    "strip_inline_styles",
]
