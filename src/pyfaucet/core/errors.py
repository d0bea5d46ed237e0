from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class FaucetError(Exception):
    """
    Failure of a token or activity operation that cannot be degraded.

    Raised when the activity feed cannot resolve its block window (chain head
    unavailable) and when a faucet transaction is mined but reverts.
    ``component`` names the service (``"activity"``, ``"token"``) and
    ``operation`` the call that failed.
    """

    message: str
    component: str = "faucet"
    operation: str = "request"
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        base = f"{self.component}.{self.operation}: {self.message}"
        if self.cause is not None:
            return f"{base} (cause: {self.cause})"
        return base


def create_error(component: str, operation: str, message: str, cause: Optional[BaseException] = None) -> FaucetError:
    return FaucetError(message=message, component=component, operation=operation, cause=cause)
