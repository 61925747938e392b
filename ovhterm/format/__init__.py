"""Text formatting for command results."""

from __future__ import annotations

from .highlight import dump_json, highlight_json
from .output import (
    Alignment,
    Field,
    FormatterOptions,
    OutputFormatter,
    Section,
    SectionConfig,
    format_value,
)

__all__ = [
    "Alignment",
    "Field",
    "FormatterOptions",
    "OutputFormatter",
    "Section",
    "SectionConfig",
    "dump_json",
    "format_value",
    "highlight_json",
]
