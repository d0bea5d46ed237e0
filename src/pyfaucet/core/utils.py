from __future__ import annotations

from decimal import Decimal, ROUND_DOWN, localcontext
from typing import Any, Optional, Union

NumberLike = Union[int, float, str, Decimal]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def parse_units(value: NumberLike, decimals: int = 18) -> int:
    if decimals < 0:
        raise ValueError("decimals must be >= 0")

    if isinstance(value, Decimal):
        dec = value
    else:
        dec = Decimal(str(value))

    with localcontext() as ctx:
        ctx.prec = max(28, len(dec.as_tuple().digits) + decimals + 2)
        scaled = (dec * (Decimal(10) ** decimals)).quantize(Decimal(1), rounding=ROUND_DOWN)
    return int(scaled)


def format_units(value: int, decimals: int = 18) -> str:
    if decimals < 0:
        raise ValueError("decimals must be >= 0")

    value = int(value)
    with localcontext() as ctx:
        ctx.prec = max(28, len(str(abs(value))) + decimals + 2)
        dec = Decimal(value) / (Decimal(10) ** decimals)
        return format(dec.normalize(), "f")


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive address comparison; ``None`` never matches."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


def to_hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else f"0x{text}"
