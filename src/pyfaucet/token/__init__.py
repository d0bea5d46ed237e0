from .service import AsyncTokenService, SyncTokenService
from .types import BalanceInfo, FaucetReceipt, TokenMetadata

__all__ = [
    "AsyncTokenService",
    "SyncTokenService",
    "BalanceInfo",
    "FaucetReceipt",
    "TokenMetadata",
]
