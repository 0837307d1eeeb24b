"""
Bech32 address validation.
"""
from typing import Union

import bech32

from .exceptions import InvalidAddressError

INVALID_ADDRESS_MESSAGE = "Address is not valid."

# BIP-173 limit; the bech32 package does not enforce it
MAX_ADDRESS_LENGTH = 90


def is_valid_address(candidate: str) -> bool:
    """
    Check whether a string is a structurally valid bech32 address.

    The checksum, charset and case rules are enforced by the decoder, the
    90 character limit is checked here, and the data part must regroup
    into whole bytes. The human-readable prefix is not checked against
    any particular chain.

    Args:
        candidate: Address to validate

    Returns:
        True if valid bech32, False otherwise
    """
    if not isinstance(candidate, str) or not candidate:
        return False
    if len(candidate) > MAX_ADDRESS_LENGTH:
        return False
    hrp, data = bech32.bech32_decode(candidate)
    if hrp is None or data is None:
        return False
    return bech32.convertbits(data, 5, 8, False) is not None


def validate_address_answer(candidate: str) -> Union[bool, str]:
    """Prompt validator: True if valid, error message string otherwise."""
    if is_valid_address(candidate):
        return True
    return INVALID_ADDRESS_MESSAGE


def require_valid_address(candidate: str) -> str:
    if not is_valid_address(candidate):
        raise InvalidAddressError(candidate)
    return candidate
