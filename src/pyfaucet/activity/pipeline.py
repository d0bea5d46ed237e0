"""
Merge, deduplicate, rank and paginate the two activity streams.

Raw entries are decoded web3 event logs (or anything indexable the same way):
``entry["args"]``, ``entry["transactionHash"]`` and ``entry["blockNumber"]``.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Set, Tuple

from pyfaucet.core.utils import ZERO_ADDRESS, format_units, same_address, to_hex
from pyfaucet.token.types import TokenMetadata
from .types import ActivityKind, ActivityRecord

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def _required(mapping: Any, key: str) -> Any:
    value = mapping[key]
    if value is None:
        raise ValueError(f"missing {key}")
    return value


def _entry_location(entry: Any) -> Tuple[str, int]:
    tx_hash = to_hex(_required(entry, "transactionHash"))
    return tx_hash, int(_required(entry, "blockNumber"))


def normalize_dispense(entry: Any, metadata: TokenMetadata) -> ActivityRecord:
    args = _required(entry, "args")
    raw_amount = int(_required(args, "amount"))
    tx_hash, block_number = _entry_location(entry)
    return ActivityRecord(
        kind=ActivityKind.DISPENSE,
        recipient=str(_required(args, "to")),
        amount=format_units(raw_amount, metadata.decimals),
        raw_amount=str(raw_amount),
        caller=args.get("caller"),
        tx_hash=tx_hash,
        block_number=block_number,
        symbol=metadata.symbol,
    )


def normalize_mint(entry: Any, metadata: TokenMetadata) -> Optional[ActivityRecord]:
    """Build a MINT record, or None for a transfer not originating at 0x0."""
    args = _required(entry, "args")
    if not same_address(args.get("from"), ZERO_ADDRESS):
        return None
    raw_amount = int(_required(args, "value"))
    tx_hash, block_number = _entry_location(entry)
    return ActivityRecord(
        kind=ActivityKind.MINT,
        recipient=str(_required(args, "to")),
        amount=format_units(raw_amount, metadata.decimals),
        raw_amount=str(raw_amount),
        caller=None,
        tx_hash=tx_hash,
        block_number=block_number,
        symbol=metadata.symbol,
    )


def normalize_entries(
    entries: Iterable[Any],
    normalize: Callable[[Any, TokenMetadata], Optional[ActivityRecord]],
    metadata: TokenMetadata,
    label: str,
) -> List[ActivityRecord]:
    records: List[ActivityRecord] = []
    for entry in entries:
        try:
            record = normalize(entry, metadata)
        except Exception as exc:
            logger.warning("skipping malformed %s entry: %r", label, exc)
            continue
        if record is not None:
            records.append(record)
    return records


def _dedup_key(record: ActivityRecord) -> Tuple[str, str]:
    return record.tx_hash.lower(), record.recipient.lower()


def merge_records(dispenses: List[ActivityRecord], mints: List[ActivityRecord]) -> List[ActivityRecord]:
    """
    Append mints to dispenses, dropping any mint already covered by a
    dispense with the same transaction and recipient.
    """
    seen: Set[Tuple[str, str]] = {_dedup_key(r) for r in dispenses}
    merged = list(dispenses)
    merged.extend(m for m in mints if _dedup_key(m) not in seen)
    return merged


def rank_records(records: List[ActivityRecord]) -> List[ActivityRecord]:
    return sorted(records, key=lambda r: r.block_number, reverse=True)


def paginate(records: List[ActivityRecord], limit: int = DEFAULT_LIMIT) -> Tuple[List[ActivityRecord], int]:
    if limit < 0:
        raise ValueError("limit must be >= 0")
    return records[:limit], len(records)


def build_records(
    dispense_entries: Iterable[Any],
    mint_entries: Iterable[Any],
    metadata: TokenMetadata,
) -> List[ActivityRecord]:
    dispenses = normalize_entries(dispense_entries, normalize_dispense, metadata, "FaucetUsed")
    mints = normalize_entries(mint_entries, normalize_mint, metadata, "Transfer")
    return rank_records(merge_records(dispenses, mints))
