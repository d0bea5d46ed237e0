from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_RPC_URL = "http://127.0.0.1:7545"
DEFAULT_PORT = 3001
DEFAULT_HOST = "0.0.0.0"
DEFAULT_FAUCET_AMOUNT = "100"
DEFAULT_LOOKBACK_BLOCKS = 1000


@dataclass(frozen=True)
class FaucetConfig:
    contract_address: str
    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    faucet_amount: str = DEFAULT_FAUCET_AMOUNT
    lookback_blocks: int = DEFAULT_LOOKBACK_BLOCKS
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, require_private_key: bool = True, dotenv: bool = True) -> "FaucetConfig":
        """
        Build configuration from environment variables.

        Reads ``.env`` first (unless ``dotenv`` is False) so local setups work
        without exporting anything.

        Raises:
            ValueError: If CONTRACT_ADDRESS is unset, or PRIVATE_KEY is unset
                while ``require_private_key`` is True.
        """
        if dotenv:
            load_dotenv()

        contract_address = os.getenv("CONTRACT_ADDRESS")
        if not contract_address:
            raise ValueError("CONTRACT_ADDRESS not set")
        private_key = os.getenv("PRIVATE_KEY") or None
        if require_private_key and private_key is None:
            raise ValueError("PRIVATE_KEY not set")

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            contract_address=contract_address,
            rpc_url=os.getenv("RPC_URL", DEFAULT_RPC_URL),
            private_key=private_key,
            host=os.getenv("HOST", DEFAULT_HOST),
            port=int(os.getenv("PORT", DEFAULT_PORT)),
            faucet_amount=os.getenv("FAUCET_AMOUNT", DEFAULT_FAUCET_AMOUNT),
            lookback_blocks=int(os.getenv("LOOKBACK_BLOCKS", DEFAULT_LOOKBACK_BLOCKS)),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
