"""
Block Repository: the in-memory authoring engine for one content document.

Every mutating call returns the new block list and leaves the repository
consistent: ids unique, ``order`` equal to array position. Nothing here
touches persistence.
"""
from __future__ import annotations

import logging
import random
import string
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from pagecms.domain.defaults import default_config, default_content, default_title
from pagecms.domain.invariants.block import assert_blocks
from pagecms.domain.schema import Block, ContentDocument, coerce_config, config_class_for
from pagecms.layout.float_image import FloatImage, FloatMode, normalize_width
from pagecms.layout import rich_text
from pagecms.normalizers.content import normalize_content, prepare_content_data
from pagecms.utils.i18n import DEFAULT_LOCALE
from pagecms.utils.order import compact_order, sort_by_order

log = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase

ALLOWED_UPDATE_FIELDS = {"title", "content", "config", "is_active"}

# camelCase spellings accepted from JSON callers
_FIELD_ALIASES = {"isActive": "is_active"}


def generate_block_id() -> str:
    """block-<epoch ms>-<9 random base36 chars>"""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"block-{millis}-{suffix}"


def deep_merge(base: Mapping, partial: Mapping) -> Dict[str, Any]:
    """Nested mappings merge; any other value (lists included) overwrites."""
    merged = dict(base)
    for key, value in partial.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def reconcile_order(blocks: Iterable[Block]) -> List[Block]:
    """
    Stored order decides the sequence once, at load time; from then on
    array position is authoritative.
    """
    return compact_order(sort_by_order(list(blocks)))


BlockRef = Union[Block, str]


class BlockRepository:
    def __init__(
        self,
        blocks: Optional[Iterable[Union[Block, Mapping]]] = None,
        *,
        locale: str = DEFAULT_LOCALE,
        id_factory: Callable[[], str] = generate_block_id,
    ):
        self.locale = locale
        self._id_factory = id_factory
        loaded = [b if isinstance(b, Block) else Block.model_validate(b) for b in (blocks or [])]
        self._blocks: List[Block] = reconcile_order(loaded)
        assert_blocks(self._blocks)

    @classmethod
    def from_document(cls, document: ContentDocument, **kwargs) -> "BlockRepository":
        return cls(document.blocks, **kwargs)

    @classmethod
    def from_content(cls, raw: Optional[str], *, locale: str = DEFAULT_LOCALE, **kwargs) -> "BlockRepository":
        return cls(normalize_content(raw, locale).blocks, locale=locale, **kwargs)

    # ------------------------
    # Read side
    # ------------------------

    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks)

    def get(self, block_id: str) -> Optional[Block]:
        for block in self._blocks:
            if block.id == block_id:
                return block
        return None

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(list(self._blocks))

    def to_document(self) -> ContentDocument:
        return ContentDocument(blocks=self.blocks)

    def prepare_content_data(self, *, now: Optional[datetime] = None) -> ContentDocument:
        return prepare_content_data(self._blocks, now=now)

    def float_images(self, block_id: str) -> List[FloatImage]:
        block = self.get(block_id)
        if block is None or block.type != "text":
            return []
        return rich_text.find_float_images(block.content)

    # ------------------------
    # Internals
    # ------------------------

    def _commit(self, blocks: List[Block]) -> List[Block]:
        blocks = compact_order(blocks)
        assert_blocks(blocks)
        self._blocks = blocks
        return self.blocks

    def _replace(self, updated: Block) -> List[Block]:
        return self._commit([updated if b.id == updated.id else b for b in self._blocks])

    def _fresh_id(self) -> str:
        taken = {b.id for b in self._blocks}
        block_id = self._id_factory()
        while block_id in taken:
            block_id = self._id_factory()
        return block_id

    # ------------------------
    # Mutations
    # ------------------------

    def add(self, block_type: str) -> List[Block]:
        """
        Appends a new block of block_type with its default config.

        Notes:
        - Text blocks get no title at all, not an empty one
        - Unknown types are accepted and start with an empty opaque config
        """
        fields: Dict[str, Any] = {
            "id": self._fresh_id(),
            "type": block_type,
            "content": default_content(block_type, self.locale),
            "config": default_config(block_type, self.locale),
            "order": len(self._blocks),
            "is_active": True,
        }
        title = default_title(block_type, self.locale)
        if title is not None:
            fields["title"] = title

        block = Block(**fields)
        log.debug("Added %s block %s", block_type, block.id)
        return self._commit(self._blocks + [block])

    def update(self, block_id: str, partial: Mapping[str, Any]) -> List[Block]:
        """
        Shallow update of one block.

        Design rules:
        - Only whitelisted fields are mutable; id, type and order are not
        - config replaces the whole config object (see merge_config)
        - Unknown id is a no-op
        """
        block = self.get(block_id)
        if block is None:
            log.debug("update: no block with id %s", block_id)
            return self.blocks

        changes: Dict[str, Any] = {}
        for key, value in partial.items():
            field = _FIELD_ALIASES.get(key, key)
            if field not in ALLOWED_UPDATE_FIELDS:
                log.warning("update: ignoring field %r on block %s", key, block_id)
                continue
            if field == "config":
                value = coerce_config(block.type, value)
            elif field == "is_active":
                if not isinstance(value, bool):
                    log.warning("update: ignoring non-bool is_active %r on block %s", value, block_id)
                    continue
            elif value is not None and not isinstance(value, str):
                log.warning("update: ignoring non-string %s on block %s", field, block_id)
                continue
            changes[field] = value

        if not changes:
            return self.blocks
        return self._replace(block.model_copy(update=changes))

    def merge_config(self, block_id: str, partial_config: Mapping[str, Any]) -> List[Block]:
        block = self.get(block_id)
        if block is None:
            return self.blocks

        variant = config_class_for(block.type)
        current = block.config.model_dump(by_alias=True, exclude_unset=True)
        partial = {}
        for key, value in partial_config.items():
            field = variant.model_fields.get(key)
            partial[field.alias if field and field.alias else key] = value

        merged = coerce_config(block.type, deep_merge(current, partial))
        return self._replace(block.model_copy(update={"config": merged}))

    def delete(self, block_id: str) -> List[Block]:
        remaining = [b for b in self._blocks if b.id != block_id]
        if len(remaining) == len(self._blocks):
            return self.blocks
        return self._commit(remaining)

    def toggle_visibility(self, block_id: str) -> List[Block]:
        block = self.get(block_id)
        if block is None:
            return self.blocks
        return self._replace(block.model_copy(update={"is_active": not block.is_active}))

    def reorder(self, sequence: Iterable[BlockRef]) -> List[Block]:
        """
        Applies a new sequence of the active blocks.

        Edge cases handled:
        - Unknown or repeated ids (ignored)
        - Inactive blocks not listed (appended, relative order kept)
        - Active blocks left out (appended after them, none is lost)
        """
        by_id = {b.id: b for b in self._blocks}
        placed: List[Block] = []
        seen = set()

        for item in sequence:
            block_id = item.id if isinstance(item, Block) else str(item)
            if block_id not in by_id or block_id in seen:
                log.debug("reorder: skipping %s", block_id)
                continue
            seen.add(block_id)
            placed.append(by_id[block_id])

        inactive = [b for b in self._blocks if b.id not in seen and b.is_active is False]
        forgotten = [b for b in self._blocks if b.id not in seen and b.is_active is not False]
        if forgotten:
            log.warning("reorder: %d active block(s) missing from the sequence, appended", len(forgotten))

        return self._commit(placed + inactive + forgotten)

    # ------------------------
    # Floating images in text blocks
    # ------------------------

    def _rewrite_text(self, block_id: str, rewrite: Callable[[str], str]) -> List[Block]:
        block = self.get(block_id)
        if block is None or block.type != "text":
            log.debug("Float image edit ignored: %s is not a text block", block_id)
            return self.blocks

        content = block.content or ""
        rewritten = rewrite(content)
        if rewritten == content:
            return self.blocks
        return self._replace(block.model_copy(update={"content": rewritten}))

    def insert_float_image(
        self,
        block_id: str,
        src: str,
        alt: str = "",
        float: str = "none",
        width=None,
    ) -> List[Block]:
        image = FloatImage(src=src, alt=alt, float=FloatMode.parse(float), width=normalize_width(width))
        return self._rewrite_text(block_id, lambda content: rich_text.insert_float_image(content, image))

    def set_image_float(self, block_id: str, index: int, float: str) -> List[Block]:
        return self._rewrite_text(
            block_id,
            lambda content: rich_text.update_float_image(content, index, lambda node: node.with_float(float)),
        )

    def set_image_width(self, block_id: str, index: int, width) -> List[Block]:
        return self._rewrite_text(
            block_id,
            lambda content: rich_text.update_float_image(content, index, lambda node: node.with_width(width)),
        )

    def remove_float_image(self, block_id: str, index: int) -> List[Block]:
        return self._rewrite_text(block_id, lambda content: rich_text.remove_float_image(content, index))
