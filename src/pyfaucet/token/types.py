from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    decimals: int


@dataclass
class BalanceInfo:
    address: str
    balance: str
    raw_balance: str
    symbol: str
    name: str
    decimals: int
    contract_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "balance": self.balance,
            "rawBalance": self.raw_balance,
            "symbol": self.symbol,
            "name": self.name,
            "decimals": str(self.decimals),
            "contractAddress": self.contract_address,
        }


@dataclass
class FaucetReceipt:
    transaction_hash: str
    block_number: int
    address: str
    amount: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "transactionHash": self.transaction_hash,
            "blockNumber": self.block_number,
            "address": self.address,
            "amount": self.amount,
        }
