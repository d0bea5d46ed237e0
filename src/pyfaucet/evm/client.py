from __future__ import annotations

from dataclasses import dataclass

from web3 import AsyncHTTPProvider, AsyncWeb3, HTTPProvider, Web3

from pyfaucet.core.config import FaucetConfig


@dataclass
class SyncEVMClient:
    web3: Web3

    @classmethod
    def from_rpc_url(cls, rpc_url: str, timeout: float = 30.0) -> "SyncEVMClient":
        return cls(web3=Web3(HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})))

    @classmethod
    def from_config(cls, config: FaucetConfig) -> "SyncEVMClient":
        return cls.from_rpc_url(config.rpc_url)


@dataclass
class AsyncEVMClient:
    web3: AsyncWeb3

    @classmethod
    def from_rpc_url(cls, rpc_url: str) -> "AsyncEVMClient":
        return cls(web3=AsyncWeb3(AsyncHTTPProvider(rpc_url)))

    @classmethod
    def from_config(cls, config: FaucetConfig) -> "AsyncEVMClient":
        return cls.from_rpc_url(config.rpc_url)
