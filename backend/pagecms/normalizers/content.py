# pagecms/normalizers/content.py
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from pagecms.domain.schema import CURRENT_VERSION, Block, ContentDocument
from pagecms.utils.i18n import DEFAULT_LOCALE, translate

log = logging.getLogger(__name__)

LEGACY_BLOCK_ID = "legacy-content"


def legacy_block(raw: str, locale: str = DEFAULT_LOCALE) -> Block:
    return Block(
        id=LEGACY_BLOCK_ID,
        type="text",
        title=translate("editor.legacy_title", locale),
        content=raw,
        order=0,
        is_active=True,
    )


def normalize_content(raw: Optional[str], locale: str = DEFAULT_LOCALE) -> ContentDocument:
    """
    Converts a stored page content string into a ContentDocument.

    Accepted shapes:
    - "" / whitespace            → empty document
    - JSON array                 → the array is the block list (flat v1 format)
    - JSON object with "blocks"  → the v2 envelope
    - anything else              → one text block holding the raw string

    Notes:
    - Never raises; malformed content is recovered, not reported
    - Odd scalar fields are repaired; only entries without a type are dropped
    """
    if raw is None or not raw.strip():
        return ContentDocument(blocks=[])

    try:
        parsed = json.loads(raw)
    except (ValueError, TypeError):
        log.debug("Content is not JSON, wrapping it as a legacy text block")
        return ContentDocument(blocks=[legacy_block(raw, locale)])

    if isinstance(parsed, list):
        return ContentDocument(blocks=coerce_blocks(parsed))

    if isinstance(parsed, dict) and isinstance(parsed.get("blocks"), list):
        return ContentDocument(
            version=parsed.get("version", CURRENT_VERSION),
            updated_at=parsed.get("updatedAt"),
            blocks=coerce_blocks(parsed["blocks"]),
        )

    # Valid JSON of an unknown shape (a number, a string, {"foo": 1}, ...)
    log.debug("Unrecognized content shape %s, wrapping it as a legacy text block", type(parsed).__name__)
    return ContentDocument(blocks=[legacy_block(raw, locale)])


_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


def _as_order(value: Any, index: int) -> int:
    if isinstance(value, bool):
        return index
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return index


def _as_flag(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def coerce_entry(entry: Dict[str, Any], index: int) -> Optional[Dict[str, Any]]:
    """
    Repairs the scalar fields of one raw block entry so validation keeps it.

    Returns None only when the entry has no usable type.
    """
    block_type = entry.get("type")
    if not isinstance(block_type, str) or not block_type.strip():
        return None

    data = dict(entry)

    block_id = data.get("id")
    if isinstance(block_id, int) and not isinstance(block_id, bool):
        block_id = str(block_id)
    if not isinstance(block_id, str) or not block_id:
        block_id = f"block-{index}"
    data["id"] = block_id

    for field in ("title", "content"):
        if field in data:
            data[field] = _as_text(data[field])

    if "order" in data:
        data["order"] = _as_order(data["order"], index)

    for key in ("isActive", "is_active"):
        if key in data:
            data[key] = _as_flag(data[key])

    return data


def coerce_blocks(entries: Iterable[Any]) -> List[Block]:
    """
    Validates raw block entries one by one.

    Edge cases handled:
    - Non-object entries or entries without a type (dropped)
    - Missing id (block-<index>)
    - Duplicate id (re-keyed to <id>-<index>)
    - Unusable order (entry index), non-string title/content (stringified
      scalars, otherwise unset), non-bool isActive ("false"/"0"/"no" are off)
    """
    blocks: List[Block] = []
    seen_ids = set()

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            log.warning("Dropping block entry %d: expected an object, got %s", index, type(entry).__name__)
            continue

        data = coerce_entry(entry, index)
        if data is None:
            log.warning("Dropping block entry %d: no usable type", index)
            continue

        try:
            block = Block.model_validate(data)
        except ValidationError as exc:
            log.warning("Dropping invalid block entry %d: %s", index, exc.errors(include_url=False))
            continue

        if block.id in seen_ids:
            rekeyed = f"{block.id}-{index}"
            while rekeyed in seen_ids:
                rekeyed = f"{rekeyed}-{index}"
            log.warning("Duplicate block id %s, re-keyed to %s", block.id, rekeyed)
            block = block.model_copy(update={"id": rekeyed})

        seen_ids.add(block.id)
        blocks.append(block)

    return blocks


def serialize_content(document: ContentDocument) -> str:
    return json.dumps(document.to_json(), ensure_ascii=False)


def prepare_content_data(
    blocks: List[Block],
    *,
    now: Optional[datetime] = None,
) -> ContentDocument:
    """
    Builds the envelope sent on every save.
    The whole document is replaced; there is no partial save.
    """
    return ContentDocument(
        version=CURRENT_VERSION,
        updated_at=now or datetime.now(timezone.utc),
        blocks=list(blocks),
    )


def normalize_content_payload(document: ContentDocument) -> Dict[str, Any]:
    """Request body of the overwrite call: {"content": "<serialized document>"}."""
    return {"content": serialize_content(document)}


# Short names used throughout the read/write paths
normalize = normalize_content
serialize = serialize_content
