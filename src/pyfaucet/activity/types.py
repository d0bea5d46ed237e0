from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from pyfaucet.token.types import TokenMetadata


class ActivityKind(str, Enum):
    DISPENSE = "faucet"
    MINT = "mint"


@dataclass(frozen=True)
class ActivityRecord:
    kind: ActivityKind
    recipient: str
    amount: str
    raw_amount: str
    tx_hash: str
    block_number: int
    symbol: str
    caller: Optional[str] = None
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "to": self.recipient,
            "amount": self.amount,
            "rawAmount": self.raw_amount,
            "caller": self.caller,
            "transactionHash": self.tx_hash,
            "blockNumber": self.block_number,
            "timestamp": self.timestamp,
            "symbol": self.symbol,
        }


@dataclass
class ActivityPage:
    events: List[ActivityRecord]
    total: int
    from_block: int
    to_block: int
    limit: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events": [e.to_dict() for e in self.events],
            "total": self.total,
            "fromBlock": self.from_block,
            "toBlock": self.to_block,
            "limit": self.limit,
        }


@dataclass
class QueryResult:
    """Outcome of one chain sub-query: either ``value`` or ``error``."""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "QueryResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "QueryResult":
        return cls(error=error)


@dataclass
class StreamBatch:
    dispense: QueryResult = field(default_factory=lambda: QueryResult.success([]))
    mint: QueryResult = field(default_factory=lambda: QueryResult.success([]))

    @property
    def is_empty(self) -> bool:
        return not (self.dispense.value or self.mint.value)


class ChainReader(Protocol):
    """Chain queries the activity feed depends on."""

    def get_block_number(self) -> int:
        ...

    def get_block_timestamp(self, block_number: int) -> Optional[int]:
        ...

    def get_metadata(self) -> TokenMetadata:
        ...

    def query_dispense_logs(self, from_block: int, to_block: int) -> List[Any]:
        ...

    def query_mint_logs(self, from_block: int, to_block: int) -> List[Any]:
        ...


class AsyncChainReader(Protocol):
    """Async counterpart of :class:`ChainReader`."""

    async def get_block_number(self) -> int:
        ...

    async def get_block_timestamp(self, block_number: int) -> Optional[int]:
        ...

    async def get_metadata(self) -> TokenMetadata:
        ...

    async def query_dispense_logs(self, from_block: int, to_block: int) -> List[Any]:
        ...

    async def query_mint_logs(self, from_block: int, to_block: int) -> List[Any]:
        ...
