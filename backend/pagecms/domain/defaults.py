from typing import Callable, Dict, List

from pagecms.domain.schema import (
    BLOCK_TYPES,
    BlockConfig,
    CTAConfig,
    DividerConfig,
    GalleryConfig,
    ImageConfig,
    ListConfig,
    ListItem,
    OpaqueConfig,
    QuoteConfig,
    TextConfig,
    VideoConfig,
)
from pagecms.utils.i18n import DEFAULT_LOCALE, translate


def _image_defaults(locale: str) -> BlockConfig:
    return ImageConfig(image_url="", alt="", caption="", alignment="center")


def _video_defaults(locale: str) -> BlockConfig:
    return VideoConfig(video_url="", autoplay=False, controls=True, caption="")


def _gallery_defaults(locale: str) -> BlockConfig:
    return GalleryConfig(images=[], layout="grid", columns=3, spacing="medium")


def _cta_defaults(locale: str) -> BlockConfig:
    return CTAConfig(
        button_text=translate("editor.cta_button_text", locale),
        button_url="",
        description="",
        style="primary",
        size="medium",
    )


def _quote_defaults(locale: str) -> BlockConfig:
    return QuoteConfig(quote="", author="", author_title="", style="simple")


def _list_defaults(locale: str) -> BlockConfig:
    return ListConfig(items=[ListItem(text="")], list_type="unordered", style="simple")


def _divider_defaults(locale: str) -> BlockConfig:
    return DividerConfig(style="line", color="#e5e7eb", thickness="medium")


# One generator per block type; a fresh object on every call
DEFAULT_CONFIG_GENERATORS: Dict[str, Callable[[str], BlockConfig]] = {
    "text": lambda locale: TextConfig(),
    "image": _image_defaults,
    "video": _video_defaults,
    "gallery": _gallery_defaults,
    "cta": _cta_defaults,
    "quote": _quote_defaults,
    "list": _list_defaults,
    "divider": _divider_defaults,
}


def default_config(block_type: str, locale: str = DEFAULT_LOCALE) -> BlockConfig:
    generator = DEFAULT_CONFIG_GENERATORS.get(block_type)
    if generator is None:
        return OpaqueConfig()
    return generator(locale)


def block_label(block_type: str, locale: str = DEFAULT_LOCALE) -> str:
    if block_type not in BLOCK_TYPES:
        return translate("editor.fallback_label", locale)
    return translate(f"blocks.{block_type}.label", locale)


def default_title(block_type: str, locale: str = DEFAULT_LOCALE):
    """Text blocks carry no title; every other type starts as "New <Label>"."""
    if block_type == "text":
        return None
    return translate("editor.new_block_title", locale, label=block_label(block_type, locale))


def default_content(block_type: str, locale: str = DEFAULT_LOCALE) -> str:
    if block_type == "text":
        return translate("editor.text_placeholder", locale)
    return ""


def block_catalog(locale: str = DEFAULT_LOCALE) -> List[Dict[str, str]]:
    return [
        {
            "type": block_type,
            "label": block_label(block_type, locale),
            "description": translate(f"blocks.{block_type}.description", locale),
        }
        for block_type in BLOCK_TYPES
    ]
