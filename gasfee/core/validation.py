# /gasfee/core/validation.py
# Local input checks run before any network round trip.
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from web3 import Web3

from gasfee.core.errors import InvalidAddress, InvalidAmount

ADDRESS_PATTERN = re.compile(r"0x[a-fA-F0-9]{40}")
EMPTY_PAYLOAD = "0x"
NATIVE_DECIMALS = 18


def is_valid_address(address: Optional[str]) -> bool:
    if not address:
        return False
    return ADDRESS_PATTERN.fullmatch(address) is not None


def require_address(address: Optional[str]) -> str:
    if not address:
        raise InvalidAddress("Please enter recipient address")
    if not is_valid_address(address):
        raise InvalidAddress(f"Invalid Ethereum address format: {address!r}")
    return address


def shorten_address(address: Optional[str]) -> Optional[str]:
    """0x1234...abcd form for logs; anything that is not an address is returned as-is."""
    if not is_valid_address(address):
        return address
    return f"{address[:6]}...{address[-4:]}"


def is_contract_call(data: Optional[str]) -> bool:
    return bool(data) and data != EMPTY_PAYLOAD


def parse_native_amount(value: Optional[str]) -> int:
    """
    Converts a decimal native-asset amount ("0.1") to wei.
    Empty input means zero. Negative, non-numeric and over-precise amounts are rejected.
    """
    text = (value or "").strip() or "0"
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(f"Invalid amount: {value!r}")
    if amount.normalize().as_tuple().exponent < -NATIVE_DECIMALS:
        raise InvalidAmount(f"Amount has more than {NATIVE_DECIMALS} decimal places: {value!r}")
    try:
        return Web3.to_wei(amount, "ether")
    except ValueError as e:
        # wei must fit in a uint256
        raise InvalidAmount(f"Amount out of range: {value!r}") from e
