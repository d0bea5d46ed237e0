"""
Faucet activity aggregation.

- ActivityFeed / AsyncActivityFeed: list recent dispenses and mints
- resolve_block_range: block window defaults
- build_records: merge, dedup and rank raw log entries
"""

from .feed import ActivityFeed, AsyncActivityFeed
from .pipeline import DEFAULT_LIMIT, build_records, merge_records, paginate, rank_records
from .range import BlockRange, resolve_block_range
from .types import ActivityKind, ActivityPage, ActivityRecord, AsyncChainReader, ChainReader, QueryResult

__all__ = [
    "ActivityFeed",
    "AsyncActivityFeed",
    "ActivityKind",
    "ActivityPage",
    "ActivityRecord",
    "AsyncChainReader",
    "ChainReader",
    "QueryResult",
    "BlockRange",
    "DEFAULT_LIMIT",
    "build_records",
    "merge_records",
    "paginate",
    "rank_records",
    "resolve_block_range",
]
