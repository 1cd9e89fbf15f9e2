"""
Serialize the sandbox's host-element tree to HTML.
"""

import html
import re
from typing import Any, Dict, List, Union

Node = Union[str, Dict[str, Any]]

VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}

# JSX prop names that differ from their HTML attribute names
ATTRIBUTE_ALIASES = {
    "className": "class",
    "htmlFor": "for",
    "tabIndex": "tabindex",
    "readOnly": "readonly",
    "autoFocus": "autofocus",
    "defaultValue": "value",
    "defaultChecked": "checked",
}

# Unitless CSS properties (numbers are not suffixed with px)
UNITLESS_STYLES = {
    "opacity", "zIndex", "fontWeight", "lineHeight", "flex", "flexGrow",
    "flexShrink", "order", "zoom", "gridRow", "gridColumn",
}

_UPPER = re.compile(r"([A-Z])")


def _css_name(name: str) -> str:
    return _UPPER.sub(lambda m: "-" + m.group(1).lower(), name)


def _style_text(style: Dict[str, Any]) -> str:
    parts = []
    for key, value in style.items():
        if value is None or value == "" or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)) and key not in UNITLESS_STYLES and value != 0:
            value = f"{value}px"
        parts.append(f"{_css_name(key)}: {value}")
    return "; ".join(parts)


def _attributes(props: Dict[str, Any]) -> str:
    rendered = []
    for key, value in props.items():
        name = ATTRIBUTE_ALIASES.get(key, key)
        if value is None or value is False:
            continue
        if value is True:
            rendered.append(f" {name}")
            continue
        if key == "style" and isinstance(value, dict):
            value = _style_text(value)
            if not value:
                continue
        elif isinstance(value, (dict, list)):
            continue
        rendered.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(rendered)


def render_markup(nodes: Union[Node, List[Node]]) -> str:
    """
    Render a host-element tree (or a list of sibling nodes) to an HTML string.

    Text nodes are escaped; element nodes are dicts with ``type``, ``props``
    and ``children``.
    """
    if isinstance(nodes, list):
        return "".join(render_markup(node) for node in nodes)
    if isinstance(nodes, str):
        return html.escape(nodes, quote=False)

    tag = nodes["type"]
    attrs = _attributes(nodes.get("props") or {})
    if tag in VOID_ELEMENTS:
        return f"<{tag}{attrs}>"
    inner = render_markup(nodes.get("children") or [])
    return f"<{tag}{attrs}>{inner}</{tag}>"
