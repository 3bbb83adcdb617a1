from __future__ import annotations

import logging
from typing import List, Optional

from markupsafe import Markup

from pagecms.domain.schema import ContentDocument
from pagecms.layout.float_image import clearfix_style
from pagecms.normalizers.content import normalize_content
from pagecms.utils.i18n import DEFAULT_LOCALE
from .renderers import RenderContext, RenderedBlock, render_block

log = logging.getLogger(__name__)


def render(
    document: ContentDocument,
    media_origin: str = "",
    locale: str = DEFAULT_LOCALE,
) -> List[RenderedBlock]:
    """
    Public renderer.

    Responsibilities:
    - skip blocks whose is_active is explicitly False
    - stable sort by order (equal orders keep document position)
    - dispatch on the config variant, dropping blocks with nothing to show

    Edge cases handled:
    - A typed renderer failing on odd data falls back to the generic renderer
    """
    ctx = RenderContext(media_origin=media_origin, locale=locale)
    visible = sorted(
        (block for block in document.blocks if block.is_active is not False),
        key=lambda block: block.order,
    )

    rendered: List[RenderedBlock] = []
    for block in visible:
        try:
            result = render_block(block.config, block, ctx)
        except (ValueError, TypeError, AttributeError, KeyError) as exc:
            log.warning("Rendering block %s (%s) failed, using generic output: %s", block.id, block.type, exc)
            result = render_block.dispatch(object)(block.config, block, ctx)
        if result is not None:
            rendered.append(result)
    return rendered


def clearfix() -> Markup:
    return Markup('<div class="block-clearfix" style="{}"></div>').format(clearfix_style())


def join_blocks(rendered: List[RenderedBlock]) -> Markup:
    """Every block followed by a float-clearing separator, the last one included."""
    separator = clearfix()
    return Markup("").join(block.html + separator for block in rendered)


def render_html(
    document: ContentDocument,
    media_origin: str = "",
    locale: str = DEFAULT_LOCALE,
) -> Markup:
    return join_blocks(render(document, media_origin, locale))


def render_content(
    raw: Optional[str],
    media_origin: str = "",
    locale: str = DEFAULT_LOCALE,
) -> Markup:
    """Read path shortcut: stored content string straight to HTML."""
    return render_html(normalize_content(raw, locale), media_origin, locale)
