"""
Per-type block renderers.

Dispatch is on the block's config variant: every known variant registers
its renderer on ``render_block``; the base implementation is the single
generic fallback used for opaque configs and unknown block types.

Renderers return None when a block has nothing to show (an image without a
URL, an empty quote); the engine drops those.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Dict, Optional, Tuple

from markupsafe import Markup

from pagecms.domain.schema import (
    Block,
    BlockConfig,
    CTAConfig,
    DividerConfig,
    GalleryConfig,
    ImageConfig,
    ListConfig,
    QuoteConfig,
    TextConfig,
    VideoConfig,
)
from pagecms.layout.float_image import HEADING_DECLARATIONS, declarations_to_style
from pagecms.layout.rich_text import apply_float_layout
from pagecms.utils.i18n import DEFAULT_LOCALE, translate
from pagecms.utils.media import resolve_media_url, video_mime_type
from .video import classify_video_url

BLOCK_STYLE = "margin: 40px 0; clear: both; display: block; width: 100%;"
CAPTION_STYLE = "text-align: center; color: #6b7280; font-size: 14px; margin-top: 16px; font-style: italic;"

GALLERY_MAX_COLUMNS = 5
GALLERY_SPACING = {"compact": "12px", "relaxed": "24px"}
GALLERY_DEFAULT_SPACING = "18px"

DIVIDER_THICKNESS = {"thin": "1px", "medium": "2px", "normal": "2px", "thick": "4px"}
DIVIDER_PATTERN = {"line": "solid", "solid": "solid", "dashed": "dashed", "dots": "dotted", "dotted": "dotted", "double": "double"}
DEFAULT_DIVIDER_COLOR = "#e5e7eb"

_SAFE_COLOR = re.compile(r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]+|rgba?\([\d\s.,%]+\)|hsla?\([\d\s.,%deg]+\))$")


@dataclass(frozen=True)
class RenderContext:
    media_origin: str = ""
    locale: str = DEFAULT_LOCALE

    def media_url(self, url: Optional[str]) -> str:
        return resolve_media_url(url, self.media_origin)


@dataclass(frozen=True)
class RenderedBlock:
    block_id: str
    block_type: str
    fragments: Tuple[Markup, ...]
    html: Markup

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.block_id,
            "type": self.block_type,
            "html": str(self.html),
            "fragments": [str(f) for f in self.fragments],
        }


def _single(block: Block, html: Markup) -> RenderedBlock:
    return RenderedBlock(block.id, block.type, (html,), html)


def _container(block: Block, inner: Markup, extra_class: str = "") -> Markup:
    classes = f"content-block content-block-{block.type}"
    if extra_class:
        classes = f"{classes} {extra_class}"
    return Markup('<div class="{}" data-block-id="{}" style="{}">{}</div>').format(
        classes, block.id, BLOCK_STYLE, inner,
    )


def _heading(title: Optional[str]) -> Markup:
    if not title:
        return Markup("")
    return Markup('<h3 class="block-title" style="{}">{}</h3>').format(
        declarations_to_style(HEADING_DECLARATIONS), title,
    )


def _caption(caption: Optional[str]) -> Markup:
    if not caption:
        return Markup("")
    return Markup('<p class="block-caption" style="{}">{}</p>').format(CAPTION_STYLE, caption)


def _looks_like_url(value: Optional[str]) -> bool:
    value = (value or "").strip()
    return bool(value) and "<" not in value and " " not in value


# ------------------------
# Fallback
# ------------------------

@singledispatch
def render_block(config: BlockConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    """
    Generic fallback: raw content when there is some, otherwise the config
    as a JSON comment so nothing is silently lost from the page source.
    """
    if block.content:
        return _single(block, _container(block, Markup(block.content), "content-block-generic"))

    data = config.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if not data:
        return None
    dumped = json.dumps(data, ensure_ascii=False, sort_keys=True).replace("--", "- -")
    return _single(block, Markup("<!-- block {}: {} -->").format(block.type, Markup(dumped)))


# ------------------------
# Typed renderers
# ------------------------

@render_block.register
def _render_text(config: TextConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    if not block.content or not block.content.strip():
        return None

    # Author-supplied rich HTML; only float images and headings are touched
    body = Markup(apply_float_layout(block.content, ctx.media_url))
    html = Markup(
        '<div class="text-content-block" data-block-id="{}" '
        'style="line-height: 1.7; clear: both; display: block; overflow: hidden; width: 100%;">{}</div>'
    ).format(block.id, body)
    return _single(block, html)


@render_block.register
def _render_image(config: ImageConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    url = config.image_url
    if not url and _looks_like_url(block.content):
        # Older editors kept the selected image URL in the block content
        url = block.content
    if not url:
        return None

    dimensions = Markup("")
    if config.width not in (None, ""):
        dimensions += Markup(' width="{}"').format(config.width)
    if config.height not in (None, ""):
        dimensions += Markup(' height="{}"').format(config.height)

    alignment = config.alignment if config.alignment in ("left", "right", "center") else "center"
    img = Markup(
        '<img src="{}" alt="{}"{} style="max-width: 100%; height: auto; display: inline-block;" loading="lazy">'
    ).format(ctx.media_url(url), config.alt or block.title or "", dimensions)

    inner = Markup('<figure style="margin: 0; text-align: {};">{}{}</figure>').format(
        alignment, img, _caption(config.caption),
    )
    return _single(block, _container(block, inner))


@render_block.register
def _render_video(config: VideoConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    extra = block.model_extra or {}
    url = config.video_url or extra.get("videoUrl") or ""
    if not url:
        return None

    source = classify_video_url(url)
    if source.is_embed:
        src = source.url
        if config.autoplay:
            src = f"{src}{'&' if '?' in src else '?'}autoplay=1"
        player = Markup(
            '<iframe src="{}" style="position: absolute; top: 0; left: 0; width: 100%; height: 100%; border: none;" '
            'allow="accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture" '
            'allowfullscreen></iframe>'
        ).format(src)
    else:
        flags = Markup("")
        if config.controls:
            flags += Markup(" controls")
        if config.autoplay:
            flags += Markup(" autoplay muted playsinline")
        src = ctx.media_url(source.url)
        player = Markup(
            '<video{} preload="metadata" '
            'style="position: absolute; top: 0; left: 0; width: 100%; height: 100%; object-fit: contain;">'
            '<source src="{}" type="{}">{}</video>'
        ).format(flags, src, video_mime_type(src), translate("editor.video_unsupported", ctx.locale))

    frame = Markup(
        '<div class="video-frame" style="position: relative; width: 100%; height: 0; padding-bottom: 56.25%; '
        'overflow: hidden; background-color: #000;">{}</div>'
    ).format(player)
    caption = config.caption or extra.get("caption")
    inner = _heading(block.title) + frame + _caption(caption)
    return _single(block, _container(block, inner))


@render_block.register
def _render_gallery(config: GalleryConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    fragments = []
    for index, image in enumerate(config.images):
        if not image.url:
            continue
        alt = image.alt or f"Gallery image {index + 1}"
        figcaption = Markup("<figcaption>{}</figcaption>").format(image.caption) if image.caption else Markup("")
        fragments.append(Markup(
            '<figure class="gallery-item" style="margin: 0;">'
            '<img src="{}" alt="{}" style="width: 100%; height: 100%; object-fit: cover; display: block;" loading="lazy">'
            '{}</figure>'
        ).format(ctx.media_url(image.url), alt, figcaption))

    if not fragments:
        return None

    columns = min(max(config.columns or 1, 1), GALLERY_MAX_COLUMNS)
    gap = GALLERY_SPACING.get(config.spacing, GALLERY_DEFAULT_SPACING)
    grid = Markup(
        '<div class="gallery-grid gallery-{}" style="display: grid; grid-template-columns: repeat({}, 1fr); gap: {};">{}</div>'
    ).format(config.layout, columns, gap, Markup("").join(fragments))

    html = _container(block, _heading(block.title) + grid)
    return RenderedBlock(block.id, block.type, tuple(fragments), html)


@render_block.register
def _render_cta(config: CTAConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    if not config.button_text and not config.description:
        return None

    description = Markup('<p class="cta-description">{}</p>').format(config.description) if config.description else Markup("")
    button = Markup("")
    if config.button_text:
        button = Markup('<a class="btn btn-{} btn-{}" href="{}">{}</a>').format(
            config.style, config.size, config.button_url or "#", config.button_text,
        )
    inner = Markup('<div class="cta cta-{}" style="text-align: center;">{}{}</div>').format(
        config.style, description, button,
    )
    return _single(block, _container(block, inner))


@render_block.register
def _render_quote(config: QuoteConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    text = config.quote or block.content
    if not text or not text.strip():
        return None

    attribution = Markup("")
    if config.author:
        attribution = Markup("<cite>{}</cite>").format(config.author)
        if config.author_title:
            attribution += Markup(', <span class="quote-author-title">{}</span>').format(config.author_title)
        attribution = Markup("<footer>{}</footer>").format(attribution)

    inner = Markup('<blockquote class="quote quote-{}"><p>{}</p>{}</blockquote>').format(
        config.style, text, attribution,
    )
    return _single(block, _container(block, inner))


@render_block.register
def _render_list(config: ListConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    items = [item.text for item in config.items if item.text and item.text.strip()]
    if not items:
        return None

    if config.list_type == "checklist":
        rows = Markup("").join(
            Markup('<li><span class="check" aria-hidden="true">&#10003;</span> {}</li>').format(text)
            for text in items
        )
        inner = Markup('<ul class="list checklist list-{}" style="list-style: none;">{}</ul>').format(config.style, rows)
    else:
        tag = "ol" if config.list_type == "ordered" else "ul"
        rows = Markup("").join(Markup("<li>{}</li>").format(text) for text in items)
        inner = Markup('<{0} class="list list-{1}">{2}</{0}>').format(Markup(tag), config.style, rows)

    return _single(block, _container(block, inner))


@render_block.register
def _render_divider(config: DividerConfig, block: Block, ctx: RenderContext) -> Optional[RenderedBlock]:
    thickness = DIVIDER_THICKNESS.get(config.thickness, DIVIDER_THICKNESS["medium"])
    pattern = DIVIDER_PATTERN.get(config.style, "solid")
    color = config.color if _SAFE_COLOR.match(config.color or "") else DEFAULT_DIVIDER_COLOR

    html = Markup(
        '<hr class="divider divider-{}" data-block-id="{}" '
        'style="margin: 50px 0; border: 0; border-top: {} {} {}; clear: both;">'
    ).format(config.style, block.id, thickness, pattern, color)
    return _single(block, html)
