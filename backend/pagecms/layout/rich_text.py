"""
Rich-text (text block content) operations for floating images.

Parsing goes through lxml.html; content without images or headings is
returned untouched so hand-written markup is never re-serialized needlessly.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional

from lxml import etree
from lxml import html as lxml_html
from markupsafe import escape

from .float_image import (
    HEADING_DECLARATIONS,
    HEADING_TAGS,
    FloatImage,
    declarations_to_style,
    merge_style,
    parse_style,
)

log = logging.getLogger(__name__)

_LAYOUT_TAGS = re.compile(r"<\s*(img|h[1-6])\b", re.IGNORECASE)

FLOAT_IMAGE_XPATH = ".//img[@data-float]"


def _parse(content: str):
    return lxml_html.fragment_fromstring(content, create_parent="div")


def _serialize(wrapper) -> str:
    parts = [str(escape(wrapper.text))] if wrapper.text else []
    for child in wrapper:
        parts.append(etree.tostring(child, encoding="unicode", method="html"))
    return "".join(parts)


def _parse_or_none(content: Optional[str]):
    if not content or not content.strip():
        return None
    try:
        return _parse(content)
    except (etree.ParserError, ValueError) as exc:
        log.warning("Could not parse rich text content: %s", exc)
        return None


def find_float_images(content: Optional[str]) -> List[FloatImage]:
    wrapper = _parse_or_none(content)
    if wrapper is None:
        return []
    return [FloatImage.from_attributes(dict(img.attrib)) for img in wrapper.xpath(FLOAT_IMAGE_XPATH)]


def apply_float_layout(
    content: Optional[str],
    resolve_src: Optional[Callable[[str], str]] = None,
) -> str:
    """
    Resolves every floating image to its final inline layout.

    Responsibilities:
    - float/margin/display declarations per node, default width when none is set
    - clear: both on every heading
    - image sources passed through resolve_src (media origin prefixing)
    """
    content = content or ""
    if not _LAYOUT_TAGS.search(content):
        return content

    wrapper = _parse_or_none(content)
    if wrapper is None:
        return content

    for img in wrapper.iter("img"):
        if "data-float" in img.attrib:
            node = FloatImage.from_attributes(dict(img.attrib))
            img.set("data-float", node.float.value)
            img.set("style", merge_style(img.get("style"), node.declarations()))
        if resolve_src and img.get("src"):
            img.set("src", resolve_src(img.get("src")))

    for heading in wrapper.iter(*HEADING_TAGS):
        heading.set("style", merge_style(heading.get("style"), HEADING_DECLARATIONS))

    return _serialize(wrapper)


# ------------------------
# Authoring operations
# ------------------------

def insert_float_image(content: Optional[str], image: FloatImage) -> str:
    """Appends the image node at the end of the content."""
    img = lxml_html.Element("img", image.to_attributes())
    wrapper = _parse_or_none(content)
    if wrapper is None:
        return (content or "") + etree.tostring(img, encoding="unicode", method="html")

    wrapper.append(img)
    return _serialize(wrapper)


def update_float_image(
    content: Optional[str],
    index: int,
    change: Callable[[FloatImage], FloatImage],
) -> str:
    """
    Rewrites the index-th floating image with change(node).
    Out-of-range indexes leave the content as it was.
    """
    wrapper = _parse_or_none(content)
    if wrapper is None:
        return content or ""

    images = wrapper.xpath(FLOAT_IMAGE_XPATH)
    if not 0 <= index < len(images):
        return content or ""

    img = images[index]
    node = change(FloatImage.from_attributes(dict(img.attrib)))
    img.set("data-float", node.float.value)
    if node.width:
        img.set("data-width", node.width)
        img.set("style", merge_style(img.get("style"), (("width", node.width),)))
    else:
        img.attrib.pop("data-width", None)
        img.attrib.pop("width", None)
        style = parse_style(img.get("style"))
        style.pop("width", None)
        if style:
            img.set("style", declarations_to_style(style.items()))
        else:
            img.attrib.pop("style", None)
    return _serialize(wrapper)


def remove_float_image(content: Optional[str], index: int) -> str:
    wrapper = _parse_or_none(content)
    if wrapper is None:
        return content or ""

    images = wrapper.xpath(FLOAT_IMAGE_XPATH)
    if not 0 <= index < len(images):
        return content or ""

    # drop_tree keeps the node's tail text in place
    images[index].drop_tree()
    return _serialize(wrapper)
