from __future__ import annotations

from typing import Optional

from web3 import AsyncWeb3, Web3

from pyfaucet.activity import ActivityFeed, AsyncActivityFeed
from pyfaucet.core.config import DEFAULT_LOOKBACK_BLOCKS, FaucetConfig
from pyfaucet.evm import AsyncEVMClient, SyncEVMClient
from pyfaucet.token import AsyncTokenService, SyncTokenService


class TokenFaucet:
    def __init__(
        self,
        web3: Web3,
        contract_address: str,
        private_key: Optional[str] = None,
        lookback: int = DEFAULT_LOOKBACK_BLOCKS,
    ) -> None:
        self._web3 = web3
        self._token = SyncTokenService(web3, contract_address, private_key=private_key)
        self._activity = ActivityFeed(self._token, lookback=lookback)

    @classmethod
    def create(cls, rpc_url: str, contract_address: str, private_key: Optional[str] = None) -> "TokenFaucet":
        client = SyncEVMClient.from_rpc_url(rpc_url)
        return cls(client.web3, contract_address, private_key)

    @classmethod
    def from_config(cls, config: FaucetConfig) -> "TokenFaucet":
        client = SyncEVMClient.from_config(config)
        return cls(client.web3, config.contract_address, config.private_key, config.lookback_blocks)

    @property
    def web3(self) -> Web3:
        return self._web3

    @property
    def account(self) -> Optional[str]:
        return self._token.account

    @property
    def token(self) -> SyncTokenService:
        return self._token

    @property
    def activity(self) -> ActivityFeed:
        return self._activity


class AsyncTokenFaucet:
    """
    Async client for a faucet-enabled ERC20 token.

    Example:
        faucet = AsyncTokenFaucet.create(rpc_url, contract_address, private_key)

        info = await faucet.token.balance("0x...")
        receipt = await faucet.token.faucet("0x...")
        page = await faucet.activity.list_activity(limit=10)
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        contract_address: str,
        private_key: Optional[str] = None,
        lookback: int = DEFAULT_LOOKBACK_BLOCKS,
    ) -> None:
        self._web3 = web3
        self._token = AsyncTokenService(web3, contract_address, private_key=private_key)
        self._activity = AsyncActivityFeed(self._token, lookback=lookback)

    @classmethod
    def create(cls, rpc_url: str, contract_address: str, private_key: Optional[str] = None) -> "AsyncTokenFaucet":
        """
        Create an async faucet client.

        Args:
            rpc_url: JSON-RPC endpoint of the chain
            contract_address: Address of the token contract
            private_key: Signing key; only needed for ``token.faucet``

        Returns:
            Configured AsyncTokenFaucet instance
        """
        client = AsyncEVMClient.from_rpc_url(rpc_url)
        return cls(client.web3, contract_address, private_key)

    @classmethod
    def from_config(cls, config: FaucetConfig) -> "AsyncTokenFaucet":
        client = AsyncEVMClient.from_config(config)
        return cls(client.web3, config.contract_address, config.private_key, config.lookback_blocks)

    @property
    def web3(self) -> AsyncWeb3:
        return self._web3

    @property
    def account(self) -> Optional[str]:
        return self._token.account

    @property
    def token(self) -> AsyncTokenService:
        return self._token

    @property
    def activity(self) -> AsyncActivityFeed:
        """Get the activity feed for faucet dispenses and mints."""
        return self._activity
