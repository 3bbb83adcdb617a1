"""
One author's editing context for one page: the Block Repository plus the
save policy (explicit save, debounced save after reorder).
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Iterable, List, Optional

from pagecms.application.cms.block_repository import BlockRef, BlockRepository
from pagecms.domain.schema import Block
from pagecms.gateway.http import PageGateway, SaveResult
from pagecms.utils.i18n import DEFAULT_LOCALE
from pagecms.utils.scheduling import DelayedTask, Scheduler

log = logging.getLogger(__name__)

DEFAULT_SAVE_DELAY = 0.5


class EditorSession:
    def __init__(
        self,
        page_id: str,
        gateway: PageGateway,
        scheduler: Optional[Scheduler] = None,
        save_delay: float = DEFAULT_SAVE_DELAY,
        locale: str = DEFAULT_LOCALE,
    ):
        self.page_id = page_id
        self.gateway = gateway
        self.locale = locale
        self.repository = BlockRepository(locale=locale)
        self.last_error: Optional[str] = None
        self.last_saved_at: Optional[datetime] = None
        self._save_lock = threading.Lock()
        self._debounced_save = DelayedTask(self._save_from_timer, save_delay, scheduler)

    # ------------------------
    # Lifecycle
    # ------------------------

    def open(self) -> List[Block]:
        """Loads the page content; PersistenceError propagates to the caller."""
        raw = self.gateway.load(self.page_id)
        self.repository = BlockRepository.from_content(raw, locale=self.locale)
        log.info("Opened page %s with %d block(s)", self.page_id, len(self.repository))
        return self.repository.blocks

    @property
    def blocks(self) -> List[Block]:
        return self.repository.blocks

    @property
    def save_pending(self) -> bool:
        return self._debounced_save.pending

    def save(self, *, now: Optional[datetime] = None) -> SaveResult:
        """
        Immediate overwrite of the stored document.

        Notes:
        - A pending debounced save is cancelled; this one covers it
        - On failure blocks stay as they are and last_error is set
        """
        self._debounced_save.cancel()
        with self._save_lock:
            document = self.repository.prepare_content_data(now=now)
            result = self.gateway.save(self.page_id, document)

        if result.success:
            self.last_error = None
            self.last_saved_at = document.updated_at
        else:
            self.last_error = result.error
        return result

    def _save_from_timer(self) -> None:
        result = self.save()
        if not result.success:
            log.warning("Debounced save of page %s failed: %s", self.page_id, result.error)

    def close(self) -> None:
        """Drops a pending debounced save without running it."""
        self._debounced_save.cancel()

    # ------------------------
    # Authoring
    # ------------------------

    def add(self, block_type: str) -> List[Block]:
        return self.repository.add(block_type)

    def update(self, block_id: str, partial) -> List[Block]:
        return self.repository.update(block_id, partial)

    def merge_config(self, block_id: str, partial_config) -> List[Block]:
        return self.repository.merge_config(block_id, partial_config)

    def delete(self, block_id: str) -> List[Block]:
        return self.repository.delete(block_id)

    def toggle_visibility(self, block_id: str) -> List[Block]:
        return self.repository.toggle_visibility(block_id)

    def reorder(self, sequence: Iterable[BlockRef]) -> List[Block]:
        """Reorders and (re)schedules a debounced save."""
        blocks = self.repository.reorder(sequence)
        self._debounced_save.schedule()
        return blocks

    def insert_float_image(self, block_id: str, src: str, alt: str = "", float: str = "none", width=None) -> List[Block]:
        return self.repository.insert_float_image(block_id, src, alt=alt, float=float, width=width)

    def set_image_float(self, block_id: str, index: int, float: str) -> List[Block]:
        return self.repository.set_image_float(block_id, index, float)

    def set_image_width(self, block_id: str, index: int, width) -> List[Block]:
        return self.repository.set_image_width(block_id, index, width)

    def remove_float_image(self, block_id: str, index: int) -> List[Block]:
        return self.repository.remove_float_image(block_id, index)
