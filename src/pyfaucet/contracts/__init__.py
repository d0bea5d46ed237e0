from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List


def _load_json(name: str) -> List[Any]:
    path = Path(__file__).with_name(name)
    return json.loads(path.read_text())


FAUCET_TOKEN_ABI = _load_json("faucet_token_abi.json")

__all__ = ["FAUCET_TOKEN_ABI"]
