"""Raw JSON rendering with pygments syntax highlighting."""

from __future__ import annotations

import json
from typing import Any

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"


def dump_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False, default=str)


def highlight_json(payload: Any, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Pretty-print ``payload`` as JSON, colored for a 256-color terminal."""
    text = dump_json(payload)
    if no_color:
        return text
    try:
        style_cls = get_style_by_name(style)
    except ClassNotFound:
        style_cls = get_style_by_name(DEFAULT_STYLE)
    return highlight(text, JsonLexer(), Terminal256Formatter(style=style_cls)).rstrip("\n")
