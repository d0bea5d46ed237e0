"""
Faucet/mint activity feed.

Each call re-reads the chain: resolve the block window, fetch the FaucetUsed
and zero-origin Transfer streams, merge and rank them, then attach block
timestamps to the returned page only.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from pyfaucet.core.config import DEFAULT_LOOKBACK_BLOCKS
from pyfaucet.core.errors import create_error
from .enrich import enrich_timestamps, enrich_timestamps_async
from .fetcher import fetch_streams, fetch_streams_async
from .pipeline import DEFAULT_LIMIT, build_records, paginate
from .range import BlockRange, needs_head, resolve_block_range
from .types import ActivityPage, ActivityRecord, AsyncChainReader, ChainReader, QueryResult, StreamBatch

logger = logging.getLogger(__name__)


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise ValueError("limit must be >= 0")


def _records_from(batch: StreamBatch, metadata: QueryResult) -> List[ActivityRecord]:
    if batch.is_empty:
        return []
    if not metadata.ok:
        logger.warning("token metadata unavailable, dropping fetched entries: %s", metadata.error)
        return []
    return build_records(batch.dispense.value or [], batch.mint.value or [], metadata.value)


class ActivityFeed:
    """
    Sync activity feed over a :class:`ChainReader`.

    Example:
        feed = ActivityFeed(token_service)
        page = feed.list_activity(limit=5)
    """

    def __init__(self, reader: ChainReader, lookback: int = DEFAULT_LOOKBACK_BLOCKS) -> None:
        self._reader = reader
        self._lookback = lookback

    def resolve_range(self, from_block: Optional[int] = None, to_block: Optional[int] = None) -> BlockRange:
        head = None
        if needs_head(from_block, to_block):
            try:
                head = self._reader.get_block_number()
            except Exception as exc:
                raise create_error("activity", "resolve_range", "failed to fetch current block number", exc) from exc
        return resolve_block_range(from_block, to_block, head, self._lookback)

    def _metadata(self) -> QueryResult:
        try:
            return QueryResult.success(self._reader.get_metadata())
        except Exception as exc:
            return QueryResult.failure(exc)

    def list_activity(
        self,
        limit: int = DEFAULT_LIMIT,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
    ) -> ActivityPage:
        """
        List recent faucet dispenses and mints, newest first.

        Args:
            limit: Maximum number of events returned
            from_block: First block to scan (default: head minus lookback)
            to_block: Last block to scan (default: head)

        Returns:
            ActivityPage with at most ``limit`` events and the pre-truncation total

        Raises:
            ValueError: If limit is negative
            FaucetError: If the chain head is needed but cannot be fetched
        """
        _check_limit(limit)
        block_range = self.resolve_range(from_block, to_block)
        batch = fetch_streams(self._reader, block_range)
        metadata = QueryResult.success(None) if batch.is_empty else self._metadata()
        page, total = paginate(_records_from(batch, metadata), limit)
        return ActivityPage(
            events=enrich_timestamps(page, self._reader),
            total=total,
            from_block=block_range.from_block,
            to_block=block_range.to_block,
            limit=limit,
        )


class AsyncActivityFeed:
    """
    Async activity feed over an :class:`AsyncChainReader`.

    The two log queries and the per-event block lookups run concurrently.

    Example:
        feed = AsyncActivityFeed(token_service)
        page = await feed.list_activity(limit=5)
    """

    def __init__(self, reader: AsyncChainReader, lookback: int = DEFAULT_LOOKBACK_BLOCKS) -> None:
        self._reader = reader
        self._lookback = lookback

    async def resolve_range(self, from_block: Optional[int] = None, to_block: Optional[int] = None) -> BlockRange:
        head = None
        if needs_head(from_block, to_block):
            try:
                head = await self._reader.get_block_number()
            except Exception as exc:
                raise create_error("activity", "resolve_range", "failed to fetch current block number", exc) from exc
        return resolve_block_range(from_block, to_block, head, self._lookback)

    async def _metadata(self) -> QueryResult:
        try:
            return QueryResult.success(await self._reader.get_metadata())
        except Exception as exc:
            return QueryResult.failure(exc)

    async def list_activity(
        self,
        limit: int = DEFAULT_LIMIT,
        from_block: Optional[int] = None,
        to_block: Optional[int] = None,
    ) -> ActivityPage:
        _check_limit(limit)
        block_range = await self.resolve_range(from_block, to_block)
        batch = await fetch_streams_async(self._reader, block_range)
        metadata = QueryResult.success(None) if batch.is_empty else await self._metadata()
        page, total = paginate(_records_from(batch, metadata), limit)
        return ActivityPage(
            events=await enrich_timestamps_async(page, self._reader),
            total=total,
            from_block=block_range.from_block,
            to_block=block_range.to_block,
            limit=limit,
        )
