"""
Conversions between display units (QBX) and base units (sQBX, 10**-18 QBX).

Both directions are exact for any amount with at most 18 decimals whose base
value fits in a uint256. Outside that range the helpers raise
UnitConversionError instead of rounding.
"""
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from web3 import Web3

TOKEN_DECIMALS = 18
SCALE = 10 ** TOKEN_DECIMALS
MAX_BASE_UNITS = 2 ** 256 - 1

DisplayAmount = Union[int, str, float, Decimal]


class UnitConversionError(ValueError):
    pass


def _as_decimal(amount: DisplayAmount) -> Decimal:
    if isinstance(amount, bool):
        raise UnitConversionError(f"Cannot convert boolean {amount!r}")
    if isinstance(amount, float):
        # go through str so 3.55 means 3.55 and not its binary approximation
        amount = str(amount)
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError):
        raise UnitConversionError(f"Not a numeric amount: {amount!r}")
    if not value.is_finite():
        raise UnitConversionError(f"Amount must be finite, got {amount!r}")
    return value


def to_base_units(amount: DisplayAmount) -> int:
    """qbx -> sqbx"""
    value = _as_decimal(amount)
    if value < 0:
        raise UnitConversionError(f"Amount must be non-negative, got {amount!r}")

    with localcontext() as ctx:
        ctx.prec = 999
        scaled = value.scaleb(TOKEN_DECIMALS)
    if scaled != scaled.to_integral_value():
        raise UnitConversionError(f"{amount!r} has more than {TOKEN_DECIMALS} decimals")
    if scaled > MAX_BASE_UNITS:
        raise UnitConversionError(f"{amount!r} does not fit in a uint256")

    return Web3.to_wei(value, "ether")


def to_display_units(amount: int) -> Decimal:
    """sqbx -> qbx"""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise UnitConversionError(f"Base units must be an int, got {type(amount).__name__}")
    if amount < 0 or amount > MAX_BASE_UNITS:
        raise UnitConversionError(f"Base units out of uint256 range: {amount}")

    return Decimal(Web3.from_wei(amount, "ether"))


def hex_encode(text: str) -> str:
    """Four hex digits per UTF-16 code unit, no 0x prefix."""
    return text.encode("utf-16-be").hex()


def hex_decode(encoded: str) -> str:
    if encoded.startswith("0x"):
        encoded = encoded[2:]
    return bytes.fromhex(encoded).decode("utf-16-be")
