from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pyfaucet.core.config import DEFAULT_LOOKBACK_BLOCKS


@dataclass(frozen=True)
class BlockRange:
    from_block: int
    to_block: int

    @property
    def is_empty(self) -> bool:
        return self.from_block > self.to_block


def needs_head(from_block: Optional[int], to_block: Optional[int]) -> bool:
    return from_block is None or to_block is None


def resolve_block_range(
    from_block: Optional[int],
    to_block: Optional[int],
    head: Optional[int] = None,
    lookback: int = DEFAULT_LOOKBACK_BLOCKS,
) -> BlockRange:
    """
    Resolve the inclusive block window to scan.

    Missing ``to_block`` means the chain head; missing ``from_block`` means
    ``lookback`` blocks behind the head (floored at 0). Supplied bounds are
    used as given, so the result may be inverted.

    Raises:
        ValueError: If a bound is missing and ``head`` was not provided
    """
    if needs_head(from_block, to_block) and head is None:
        raise ValueError("current block height required to resolve an open range")
    resolved_to = to_block if to_block is not None else head
    resolved_from = from_block if from_block is not None else max(0, head - lookback)
    return BlockRange(from_block=int(resolved_from), to_block=int(resolved_to))
