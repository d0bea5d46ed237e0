"""Core primitives: errors, unit conversion and configuration."""

from .config import DEFAULT_LOOKBACK_BLOCKS, FaucetConfig
from .errors import FaucetError, create_error
from .utils import ZERO_ADDRESS, format_units, parse_units, same_address, to_hex

__all__ = [
    "FaucetConfig",
    "DEFAULT_LOOKBACK_BLOCKS",
    "FaucetError",
    "create_error",
    "ZERO_ADDRESS",
    "format_units",
    "parse_units",
    "same_address",
    "to_hex",
]
