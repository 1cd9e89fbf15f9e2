"""
Sandbox Executor - Run compiled component code in an isolated interpreter.

Isolation model:
- Every call gets a fresh Duktape interpreter; nothing survives between runs
- The component body sees exactly the binding table: React, useState,
  exports and module
- Interpreter-level globals (dukpy, call_python, require, Duktape) are
  shadowed inside the component scope
- The component must be exported with ``module.exports = Component``

This isolates accidental errors in generated code. It is not a security
boundary: there are no CPU or memory limits.
"""

import logging
from typing import Any, Dict, Optional

import dukpy

from livepreview.errors import ComponentRuntimeError
from livepreview.sandbox.markup import render_markup
from livepreview.sandbox.runtime import BINDING_NAMES, RUNTIME_JS, SCOPE_JS, SHADOWED_NAMES
from livepreview.schemas import RenderedPreview


logger = logging.getLogger(__name__)


def execute(compiled_source: str, properties: Optional[Dict[str, Any]] = None) -> RenderedPreview:
    """
    Execute compiled source and render the exported component.

    Args:
        compiled_source: Output of the transpiler
        properties: Props passed to the exported component

    Returns:
        RenderedPreview with the element tree and its HTML

    Raises:
        ComponentRuntimeError: If execution, export extraction or rendering fails
    """
    try:
        interpreter = dukpy.JSInterpreter()
        interpreter.evaljs(RUNTIME_JS)
        tree = interpreter.evaljs(
            SCOPE_JS,
            params=list(BINDING_NAMES + SHADOWED_NAMES),
            source=compiled_source,
            props=dict(properties or {}),
        )
        markup = render_markup(tree or [])
    except Exception as e:
        logger.debug("Sandbox execution failed: %s", e)
        raise ComponentRuntimeError(f"Runtime error: {_first_line(e)}") from e

    return RenderedPreview(html=markup, tree=tree)


class SandboxExecutor:
    """Callable wrapper so the executor can be swapped in the pipeline."""

    def execute(self, compiled_source: str, properties: Optional[Dict[str, Any]] = None) -> RenderedPreview:
        return execute(compiled_source, properties)


def _first_line(exc: Exception) -> str:
    message = str(exc).strip()
    return message.splitlines()[0] if message else exc.__class__.__name__
