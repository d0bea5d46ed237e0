from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import Any, Awaitable, Callable, List

from .range import BlockRange
from .types import AsyncChainReader, ChainReader, QueryResult, StreamBatch

logger = logging.getLogger(__name__)

DISPENSE_STREAM = "FaucetUsed"
MINT_STREAM = "Transfer(from=0x0)"


def _run_query(name: str, query: Callable[[int, int], List[Any]], block_range: BlockRange) -> QueryResult:
    try:
        return QueryResult.success(list(query(block_range.from_block, block_range.to_block)))
    except Exception as exc:
        logger.warning(
            "%s log query failed for blocks %d-%d: %s",
            name, block_range.from_block, block_range.to_block, exc,
        )
        return QueryResult.failure(exc)


async def _run_query_async(
    name: str, query: Callable[[int, int], Awaitable[List[Any]]], block_range: BlockRange
) -> QueryResult:
    try:
        return QueryResult.success(list(await query(block_range.from_block, block_range.to_block)))
    except Exception as exc:
        logger.warning(
            "%s log query failed for blocks %d-%d: %s",
            name, block_range.from_block, block_range.to_block, exc,
        )
        return QueryResult.failure(exc)


def fetch_streams(reader: ChainReader, block_range: BlockRange) -> StreamBatch:
    """Query both log streams in parallel threads; each fails on its own."""
    if block_range.is_empty:
        return StreamBatch()
    with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
        dispense = executor.submit(_run_query, DISPENSE_STREAM, reader.query_dispense_logs, block_range)
        mint = executor.submit(_run_query, MINT_STREAM, reader.query_mint_logs, block_range)
        return StreamBatch(dispense=dispense.result(), mint=mint.result())


async def fetch_streams_async(reader: AsyncChainReader, block_range: BlockRange) -> StreamBatch:
    if block_range.is_empty:
        return StreamBatch()
    dispense, mint = await asyncio.gather(
        _run_query_async(DISPENSE_STREAM, reader.query_dispense_logs, block_range),
        _run_query_async(MINT_STREAM, reader.query_mint_logs, block_range),
    )
    return StreamBatch(dispense=dispense, mint=mint)
