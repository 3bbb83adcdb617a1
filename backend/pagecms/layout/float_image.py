"""
Floating-image layout contract.

Images embedded in rich text are ``<img data-float="left|right|none">`` nodes
with an optional explicit width. The declarations below are the only place
the layout is defined: the public renderer inlines them per node and the
editing surface loads them as a stylesheet, so both always agree.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class FloatMode(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"

    @classmethod
    def parse(cls, value: Optional[str]) -> "FloatMode":
        """Unknown or missing values lay out as NONE."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NONE


DEFAULT_WIDTHS: Dict[FloatMode, str] = {
    FloatMode.LEFT: "300px",
    FloatMode.RIGHT: "300px",
    FloatMode.NONE: "600px",
}

FLOAT_DECLARATIONS: Dict[FloatMode, Tuple[Tuple[str, str], ...]] = {
    FloatMode.LEFT: (
        ("float", "left"),
        ("margin", "0 20px 20px 0"),
        ("max-width", "100%"),
        ("height", "auto"),
    ),
    FloatMode.RIGHT: (
        ("float", "right"),
        ("margin", "0 0 20px 20px"),
        ("max-width", "100%"),
        ("height", "auto"),
    ),
    FloatMode.NONE: (
        ("float", "none"),
        ("display", "block"),
        ("margin", "20px auto"),
        ("max-width", "100%"),
        ("height", "auto"),
    ),
}

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
HEADING_DECLARATIONS: Tuple[Tuple[str, str], ...] = (("clear", "both"),)

CLEARFIX_DECLARATIONS: Tuple[Tuple[str, str], ...] = (
    ("clear", "both"),
    ("display", "block"),
    ("overflow", "hidden"),
    ("height", "0"),
    ("line-height", "0"),
    ("font-size", "0"),
)

_WIDTH_IN_STYLE = re.compile(r"(?:^|;)\s*width\s*:\s*([^;]+)", re.IGNORECASE)


def declarations_to_style(declarations) -> str:
    return "; ".join(f"{name}: {value}" for name, value in declarations) + ";"


def parse_style(style: Optional[str]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for part in (style or "").split(";"):
        name, sep, value = part.partition(":")
        if sep and name.strip():
            result[name.strip().lower()] = value.strip()
    return result


def merge_style(style: Optional[str], declarations) -> str:
    """Layout declarations win over whatever the node already had."""
    merged = parse_style(style)
    for name, value in declarations:
        merged[name] = value
    return declarations_to_style(merged.items())


@dataclass(frozen=True)
class FloatImage:
    src: str
    alt: str = ""
    float: FloatMode = FloatMode.NONE
    width: Optional[str] = None  # explicit width; None means "use the default"

    @property
    def effective_width(self) -> str:
        return self.width or DEFAULT_WIDTHS[self.float]

    def with_float(self, mode) -> "FloatImage":
        # An explicit width survives the change; a default one follows the new mode
        return replace(self, float=FloatMode.parse(mode) if isinstance(mode, str) else mode)

    def with_width(self, width: Optional[str]) -> "FloatImage":
        return replace(self, width=normalize_width(width))

    def declarations(self) -> Tuple[Tuple[str, str], ...]:
        return FLOAT_DECLARATIONS[self.float] + (("width", self.effective_width),)

    def style(self) -> str:
        return declarations_to_style(self.declarations())

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, str]) -> "FloatImage":
        """
        Reads a node from its HTML attributes.

        Width precedence: inline style, then data-width, then the width
        attribute. Nothing found means no explicit width.
        """
        width = None
        match = _WIDTH_IN_STYLE.search(attrs.get("style") or "")
        if match:
            width = match.group(1)
        width = width or attrs.get("data-width") or attrs.get("width")

        return cls(
            src=attrs.get("src") or "",
            alt=attrs.get("alt") or "",
            float=FloatMode.parse(attrs.get("data-float")),
            width=normalize_width(width),
        )

    def to_attributes(self) -> Dict[str, str]:
        attrs = {
            "src": self.src,
            "alt": self.alt,
            "data-float": self.float.value,
        }
        if self.width:
            attrs["data-width"] = self.width
            attrs["style"] = f"width: {self.width};"
        return attrs


def normalize_width(width) -> Optional[str]:
    """300 → "300px"; blank → None; anything else kept as written."""
    if width is None:
        return None
    if isinstance(width, (int, float)) and not isinstance(width, bool):
        return f"{int(width) if float(width).is_integer() else width}px"
    width = str(width).strip()
    if not width:
        return None
    if width.replace(".", "", 1).isdigit():
        return f"{width}px"
    return width


def clearfix_style() -> str:
    return declarations_to_style(CLEARFIX_DECLARATIONS)


def editor_stylesheet(scope: str = ".ProseMirror") -> str:
    """
    CSS for the editing surface, generated from the same declarations the
    public renderer inlines.
    """
    rules = []
    for mode in FloatMode:
        body = declarations_to_style(FLOAT_DECLARATIONS[mode])
        rules.append(f'{scope} img[data-float="{mode.value}"] {{ {body} }}')
        # Default width only when the node carries no explicit one
        rules.append(
            f'{scope} img[data-float="{mode.value}"]:not([style*="width"]) '
            f'{{ width: {DEFAULT_WIDTHS[mode]}; }}'
        )

    headings = ", ".join(f"{scope} {tag}" for tag in HEADING_TAGS)
    rules.append(f"{headings} {{ {declarations_to_style(HEADING_DECLARATIONS)} }}")
    rules.append(f'{scope}::after {{ content: ""; display: table; clear: both; }}')
    return "\n".join(rules) + "\n"
