"""pyfaucet - Python SDK and API for faucet-enabled ERC20 tokens."""

from ._version import __version__
from .faucet import AsyncTokenFaucet, TokenFaucet

__all__ = ["__version__", "TokenFaucet", "AsyncTokenFaucet"]
