from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from dataclasses import replace
from typing import List, Optional

from .types import ActivityRecord, AsyncChainReader, ChainReader

logger = logging.getLogger(__name__)

MAX_LOOKUP_WORKERS = 32


def _log_lookup_failure(record: ActivityRecord, exc: BaseException) -> None:
    logger.debug("block %d lookup failed for tx %s: %s", record.block_number, record.tx_hash, exc)


def enrich_timestamps(records: List[ActivityRecord], reader: ChainReader) -> List[ActivityRecord]:
    if not records:
        return []

    def lookup(record: ActivityRecord) -> ActivityRecord:
        try:
            timestamp: Optional[int] = reader.get_block_timestamp(record.block_number)
        except Exception as exc:
            _log_lookup_failure(record, exc)
            return record
        return replace(record, timestamp=timestamp)

    with concurrent.futures.ThreadPoolExecutor(max_workers=min(len(records), MAX_LOOKUP_WORKERS)) as executor:
        return list(executor.map(lookup, records))


async def enrich_timestamps_async(records: List[ActivityRecord], reader: AsyncChainReader) -> List[ActivityRecord]:
    async def lookup(record: ActivityRecord) -> ActivityRecord:
        try:
            timestamp = await reader.get_block_timestamp(record.block_number)
        except Exception as exc:
            _log_lookup_failure(record, exc)
            return record
        return replace(record, timestamp=timestamp)

    return list(await asyncio.gather(*[lookup(r) for r in records]))
