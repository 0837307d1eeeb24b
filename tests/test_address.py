"""
Tests for bech32 address validation.
"""
import pytest
import bech32
from hypothesis import given, strategies as st

from nft_transfer.address import (
    is_valid_address, validate_address_answer, require_valid_address, INVALID_ADDRESS_MESSAGE,
    MAX_ADDRESS_LENGTH
)
from nft_transfer.exceptions import InvalidAddressError
from tests.test_helpers import KNOWN_VALID_ADDRESS, TEST_COLLECTION, make_address


def test_known_valid_address():
    """Test a BIP-173 vector with a whole-byte payload"""
    assert is_valid_address(KNOWN_VALID_ADDRESS)
    assert is_valid_address(KNOWN_VALID_ADDRESS.upper())


def test_generated_sei_address():
    assert is_valid_address(TEST_COLLECTION)
    assert TEST_COLLECTION.startswith("sei1")


@pytest.mark.parametrize("candidate", [
    "",
    "   ",
    "sei",
    # No separator
    "pzry9x0s0muk",
    # Empty human-readable part
    "1pzry9x0s0muk",
    # Invalid data character
    "x1b4n0q5v",
    # Checksum too short
    "li1dgmt3",
    # Wrong checksum
    KNOWN_VALID_ADDRESS[:-1] + ("q" if KNOWN_VALID_ADDRESS[-1] != "q" else "p"),
    # Mixed case
    "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqXw",
    # Ethereum-style address
    "0x1234567890123456789012345678901234567890",
])
def test_invalid_addresses(candidate):
    assert is_valid_address(candidate) is False


def test_non_string_is_invalid():
    """Test that non-string input never raises"""
    assert is_valid_address(None) is False
    assert is_valid_address(12345) is False
    assert is_valid_address(b"sei1abc") is False


def test_address_over_length_limit():
    """Test that the 90 character bech32 limit is enforced"""
    long_address = bech32.bech32_encode("sei", bech32.convertbits(bytes(60), 8, 5))
    assert len(long_address) > 90
    assert is_valid_address(long_address) is False


def test_address_length_boundary():
    """A 90 character address is the longest accepted"""
    longest = bech32.bech32_encode("sei", bech32.convertbits(bytes(50), 8, 5))
    too_long = bech32.bech32_encode("sei", bech32.convertbits(bytes(51), 8, 5))
    assert len(longest) == MAX_ADDRESS_LENGTH
    assert is_valid_address(longest) is True
    assert len(too_long) > MAX_ADDRESS_LENGTH
    assert validate_address_answer(too_long) == INVALID_ADDRESS_MESSAGE


def test_validate_address_answer():
    assert validate_address_answer(TEST_COLLECTION) is True
    assert validate_address_answer("nope") == INVALID_ADDRESS_MESSAGE


def test_require_valid_address():
    assert require_valid_address(TEST_COLLECTION) == TEST_COLLECTION
    with pytest.raises(InvalidAddressError, match="Address is not valid.") as exc_info:
        require_valid_address("sei1invalid")
    assert exc_info.value.address == "sei1invalid"


@given(seed=st.binary(min_size=1, max_size=32), prefix=st.sampled_from(["sei", "cosmos", "stars", "osmo"]))
def test_encoded_addresses_are_valid(seed, prefix):
    """Any 20-byte payload encoded with bech32 validates"""
    assert is_valid_address(make_address(prefix, seed))


@given(seed=st.binary(min_size=1, max_size=32), position=st.integers(min_value=4))
def test_single_character_substitution_is_invalid(seed, position):
    """Changing one data character breaks the checksum"""
    address = make_address("sei", seed)
    index = position % (len(address) - 4) + 4
    current = address[index]
    replacement = "q" if current != "q" else "p"
    mutated = address[:index] + replacement + address[index + 1:]
    assert is_valid_address(mutated) is False
