"""
Content document schema.

A page's content is a single ContentDocument holding an ordered list of
Block. Every known block type owns a config variant; any other type keeps its
config in OpaqueConfig so it survives a load/save cycle untouched.

JSON keys are camelCase (``imageUrl``, ``isActive``), Python attributes are
snake_case. Unknown keys are kept on every model and written back on save.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union

from dateutil import parser as date_parser
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

log = logging.getLogger(__name__)

CURRENT_VERSION = "2.0"

BLOCK_TYPES = ("text", "image", "video", "gallery", "cta", "quote", "list", "divider")

Dimension = Union[int, float, str]


class SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# ------------------------
# Config variants
# ------------------------

class BlockConfig(SchemaModel):
    """Base class of every per-type config variant."""


class TextConfig(BlockConfig):
    pass


class ImageConfig(BlockConfig):
    image_url: str = ""
    alt: str = ""
    caption: str = ""
    alignment: str = "center"
    width: Optional[Dimension] = None
    height: Optional[Dimension] = None


class VideoConfig(BlockConfig):
    video_url: str = ""
    autoplay: bool = False
    controls: bool = True
    caption: str = ""


class GalleryImage(SchemaModel):
    id: str = ""
    url: str = ""
    alt: str = ""
    caption: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class GalleryConfig(BlockConfig):
    images: List[GalleryImage] = Field(default_factory=list)
    layout: str = "grid"
    columns: int = 3
    spacing: str = "medium"


class CTAConfig(BlockConfig):
    button_text: str = ""
    button_url: str = ""
    description: str = ""
    style: str = "primary"
    size: str = "medium"


class QuoteConfig(BlockConfig):
    quote: str = ""
    author: str = ""
    author_title: str = ""
    style: str = "simple"


class ListItem(SchemaModel):
    text: str = ""


class ListConfig(BlockConfig):
    items: List[ListItem] = Field(default_factory=list)
    list_type: str = "unordered"
    style: str = "simple"

    @field_validator("items", mode="before")
    @classmethod
    def _wrap_plain_items(cls, value: Any) -> Any:
        # Older editors stored list items as bare strings
        if isinstance(value, list):
            return [{"text": item} if isinstance(item, str) else item for item in value]
        return value


class DividerConfig(BlockConfig):
    style: str = "line"
    color: str = "#e5e7eb"
    thickness: str = "medium"


class OpaqueConfig(BlockConfig):
    """Config of an unrecognized block type, or one that fits no variant."""


CONFIG_BY_TYPE: Dict[str, Type[BlockConfig]] = {
    "text": TextConfig,
    "image": ImageConfig,
    "video": VideoConfig,
    "gallery": GalleryConfig,
    "cta": CTAConfig,
    "quote": QuoteConfig,
    "list": ListConfig,
    "divider": DividerConfig,
}


def config_class_for(block_type: Optional[str]) -> Type[BlockConfig]:
    return CONFIG_BY_TYPE.get(block_type or "", OpaqueConfig)


def coerce_config(block_type: Optional[str], value: Any) -> BlockConfig:
    """
    Turn a raw config value into the variant owned by ``block_type``.

    Never raises: a config that does not fit its variant is kept as
    OpaqueConfig so the block still round-trips and renders via fallback.
    """
    variant = config_class_for(block_type)

    if isinstance(value, variant):
        return value
    if isinstance(value, BlockConfig):
        value = value.model_dump(by_alias=True, exclude_unset=True)
    if value is None or not isinstance(value, Mapping):
        value = {}

    try:
        return variant.model_validate(dict(value))
    except ValidationError as exc:
        log.warning(
            "Config for %s block does not fit its schema, keeping it opaque: %s",
            block_type, exc.errors(include_url=False),
        )
        return OpaqueConfig.model_validate(dict(value))


# ------------------------
# Block & document
# ------------------------

class Block(SchemaModel):
    id: str
    type: str
    title: Optional[str] = None
    content: Optional[str] = None
    config: SerializeAsAny[BlockConfig]
    order: int = 0
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def _default_config(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and "config" not in data:
            data = {**data, "config": {}}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("config", mode="before")
    @classmethod
    def _config_variant(cls, value: Any, info: ValidationInfo) -> BlockConfig:
        return coerce_config(info.data.get("type"), value)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ContentDocument(SchemaModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    version: str = CURRENT_VERSION
    updated_at: Optional[datetime] = None
    blocks: List[Block] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if value is not None:
            log.debug("Replacing unusable document version %r with %s", value, CURRENT_VERSION)
        return CURRENT_VERSION

    @field_validator("updated_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> Optional[datetime]:
        if value is None or isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not value.strip():
            return None

        try:
            return date_parser.isoparse(value)
        except ValueError:
            pass

        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            log.debug("Dropping unparseable updatedAt value %r", value)
            return None

    def to_json(self) -> Dict[str, Any]:
        return {
            "blocks": [block.to_json() for block in self.blocks],
            "version": self.version,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
