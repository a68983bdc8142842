"""
Site Content Cache

Read-through cache of the ``site_content`` table, owned by one
application instance and handed to endpoints through a dependency.

- Loaded lazily: the first read pulls every row.
- Kept fresh by change events: INSERT/UPDATE set a key, DELETE drops it.
- invalidate() forgets everything; the next read reloads.

One asyncio.Lock makes concurrent first reads share a single load.
Events that arrive while that load is in flight are queued and replayed
on top of the snapshot, and an invalidate() during the load makes it
start over, so the snapshot never overwrites a newer change.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.site_content_repo import SiteContentRepository
from app.schemas.content import ContentChangeEvent

logger = logging.getLogger(__name__)


class SiteContentCache:
    def __init__(self, session_factory: Callable[[], AsyncSession]):
        """
        Args:
            session_factory: Creates a session used for the initial load
        """
        self._session_factory = session_factory
        self._content: Dict[str, str] = {}
        self._loaded = False
        self._loading = False
        self._pending: List[ContentChangeEvent] = []
        # Bumped by invalidate(); a load that sees it move discards its snapshot
        self._epoch = 0
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        async with self._lock:
            while not self._loaded:
                epoch = self._epoch
                self._pending = []
                self._loading = True
                try:
                    async with self._session_factory() as session:
                        content = await SiteContentRepository(session).get_all_pairs()
                finally:
                    self._loading = False

                if epoch != self._epoch:
                    logger.info("Site content cache invalidated during load, reloading")
                    continue

                pending, self._pending = self._pending, []
                self._content = content
                self._loaded = True
                for event in pending:
                    self._apply(event)

                if self._loaded:
                    logger.info(
                        f"Site content cache loaded ({len(self._content)} keys, "
                        f"{len(pending)} queued changes replayed)"
                    )

    async def get_all(self) -> Dict[str, str]:
        """Snapshot of every key."""
        await self._ensure_loaded()
        return dict(self._content)

    async def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        await self._ensure_loaded()
        return self._content.get(key, default)

    def apply_change(self, event: ContentChangeEvent) -> bool:
        """
        Patch the cache from one change event.

        Events that arrive before any load has started are dropped; the
        first load reads the table and sees the change anyway. Events
        that arrive during a load are queued and replayed once its
        snapshot is installed.

        Returns:
            True if the cache was modified now
        """
        if self._loading:
            self._pending.append(event)
            return False

        if not self._loaded:
            return False

        return self._apply(event)

    def _apply(self, event: ContentChangeEvent) -> bool:
        if event.type in ("INSERT", "UPDATE"):
            record = event.record or {}
            key = record.get("content_key")
            if key is None:
                logger.warning(f"Ignoring {event.type} event without content_key")
                return False
            self._content[key] = record.get("content_value") or ""
            return True

        record = event.old_record or {}
        key = record.get("content_key")
        if key is None:
            # Old row carries only its primary key; we cannot tell which entry went away
            logger.info("DELETE event without content_key, dropping cache")
            self.invalidate()
            return True
        return self._content.pop(key, None) is not None

    def invalidate(self) -> None:
        self._content = {}
        self._loaded = False
        self._pending = []
        self._epoch += 1
