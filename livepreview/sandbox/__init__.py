"""
Sandbox module for executing compiled component code in isolated interpreters.

Components:
- executor: Run compiled code with an explicit binding table and render it
- runtime: The minimal static React installed into each interpreter
- markup: Serialize the rendered element tree to HTML
"""

from livepreview.sandbox.executor import SandboxExecutor, execute
from livepreview.sandbox.markup import render_markup
from livepreview.sandbox.runtime import BINDING_NAMES, SHADOWED_NAMES

__all__ = [
    # Executor
    "SandboxExecutor",
    "execute",
    # Markup
    "render_markup",
    # Runtime
    "BINDING_NAMES",
    "SHADOWED_NAMES",
]
