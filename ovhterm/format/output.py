"""Plain-text report formatting for command output.

A report is a list of titled sections, each holding aligned key/value
fields. Long values wrap under their own column.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def _align(text: str, width: int, alignment: Alignment) -> str:
    if alignment is Alignment.RIGHT:
        return text.rjust(width)
    if alignment is Alignment.CENTER:
        return text.center(width)
    return text.ljust(width)


@dataclass(frozen=True)
class SectionConfig:
    """Layout knobs for one section."""

    title_alignment: Alignment = Alignment.LEFT
    title_decorator: str = "="
    key_alignment: Alignment = Alignment.LEFT
    indent: int = 0
    key_value_spacing: int = 1


@dataclass(frozen=True)
class FormatterOptions:
    max_width: int = 80
    separator: str = "\n"


@dataclass
class Field:
    key: str
    value: str
    skip_if_empty: bool = False


def format_value(value: Any) -> str:
    """Render a decoded JSON scalar or list as display text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(item) for item in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}={format_value(v)}" for k, v in value.items())
    return str(value)


@dataclass
class Section:
    title: str
    config: SectionConfig = field(default_factory=SectionConfig)
    fields: list[Field] = field(default_factory=list)

    def add_field(self, key: str, value: Any, *, skip_if_empty: bool = False) -> Section:
        self.fields.append(Field(key, format_value(value), skip_if_empty))
        return self

    def add_fields(self, data: dict[str, Any], keys: dict[str, str], *, skip_if_empty: bool = True) -> Section:
        """Add ``keys`` (source key -> label) from ``data`` in declaration order."""
        for source_key, label in keys.items():
            self.add_field(label, data.get(source_key), skip_if_empty=skip_if_empty)
        return self

    def visible_fields(self) -> list[Field]:
        return [f for f in self.fields if not (f.skip_if_empty and not f.value.strip())]

    def render(self, max_width: int) -> list[str]:
        visible = self.visible_fields()
        if not visible:
            return []
        cfg = self.config
        indent = " " * max(0, cfg.indent)
        out: list[str] = []
        if self.title:
            out.append(indent + _align(self.title, max(len(self.title), max_width - len(indent)), cfg.title_alignment).rstrip())
            if cfg.title_decorator:
                out.append(indent + (cfg.title_decorator * len(self.title))[: len(self.title)])

        key_width = max(len(f.key) for f in visible) + 1
        value_col = len(indent) + key_width + max(1, cfg.key_value_spacing)
        value_width = max(10, max_width - value_col)
        for f in visible:
            key_text = _align(f"{f.key}:", key_width, cfg.key_alignment)
            prefix = indent + key_text + " " * max(1, cfg.key_value_spacing)
            value_lines: list[str] = []
            for raw_line in f.value.splitlines() or [""]:
                value_lines.extend(textwrap.wrap(raw_line, value_width) or [""])
            out.append((prefix + value_lines[0]).rstrip())
            for extra in value_lines[1:]:
                out.append(" " * value_col + extra)
        return out


class OutputFormatter:
    """Collects sections and renders them as one text block."""

    def __init__(self, options: FormatterOptions | None = None) -> None:
        self.options = options or FormatterOptions()
        self.sections: list[Section] = []

    def add_section(self, title: str, config: SectionConfig | None = None) -> Section:
        section = Section(title, config or SectionConfig())
        self.sections.append(section)
        return section

    def render(self) -> str:
        blocks = []
        for section in self.sections:
            lines = section.render(self.options.max_width)
            if lines:
                blocks.append("\n".join(lines) + "\n")
        return self.options.separator.join(blocks)

    def __str__(self) -> str:
        return self.render()


__all__ = [
    "Alignment",
    "Field",
    "FormatterOptions",
    "OutputFormatter",
    "Section",
    "SectionConfig",
    "format_value",
]
