"""Periodic full sync of every active store.

The runner receives both of its collaborators, so it holds no global
state and tests can drive it with plain coroutines.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from shopmetrics.core.errors import SyncInProgressError

logger = logging.getLogger(__name__)


@dataclass
class ScheduledSyncReport:
    """Outcome of one pass over the active stores."""

    synced: list[UUID] = field(default_factory=list)
    skipped: list[UUID] = field(default_factory=list)
    failed: list[UUID] = field(default_factory=list)

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "synced": [str(s) for s in self.synced],
            "skipped": [str(s) for s in self.skipped],
            "failed": [str(s) for s in self.failed],
        }


class ScheduledSyncRunner:
    """Runs a full sync for each active store, one store at a time.

    A failing store is logged and the loop moves on. A store whose
    previous sync is still running is skipped.
    """

    def __init__(
        self,
        list_active_stores: Callable[[], Awaitable[Sequence[UUID]]],
        run_full_sync: Callable[[UUID], Awaitable[Any]],
    ) -> None:
        self.list_active_stores = list_active_stores
        self.run_full_sync = run_full_sync

    async def run_once(self) -> ScheduledSyncReport:
        report = ScheduledSyncReport()

        for store_id in await self.list_active_stores():
            try:
                await self.run_full_sync(store_id)
            except SyncInProgressError:
                logger.info("Store %s is still syncing; skipping this run", store_id)
                report.skipped.append(store_id)
            except Exception:
                logger.exception("Scheduled sync failed for store %s", store_id)
                report.failed.append(store_id)
            else:
                report.synced.append(store_id)

        logger.info(
            "Scheduled sync pass done: %d synced, %d skipped, %d failed",
            len(report.synced),
            len(report.skipped),
            len(report.failed),
        )
        return report
