"""
Shared constants and fakes for the nft-transfer tests.
"""
import hashlib
from typing import List, Optional, Sequence

import bech32


def make_address(prefix: str = "sei", seed: bytes = b"") -> str:
    """Encode a deterministic 20-byte payload as a bech32 address"""
    payload = hashlib.sha256(seed).digest()[:20]
    return bech32.bech32_encode(prefix, bech32.convertbits(payload, 8, 5))


# Constants for testing
# BIP-173 test vector, 20 bytes of data
KNOWN_VALID_ADDRESS = "abcdef1qpzry9x8gf2tvdw0s3jn54khce6mua7lmqqqxw"
TEST_RPC_URL = "https://rest.example.com"
TEST_GAS_PRICE = "0.1usei"
TEST_COLLECTION = make_address("sei", b"collection")
TEST_RECIPIENT = make_address("sei", b"recipient")
TEST_PRIV_KEY = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
OTHER_PRIV_KEY = "fedcba9876543210fedcba9876543210fedcba9876543210fedcba9876543210"


class FakeSigner:
    """Signer stand-in whose address is derived from the key bytes"""

    def __init__(self, key_bytes: bytes, prefix: str):
        self.key_bytes = key_bytes
        self._address = make_address(prefix, key_bytes)

    def address(self) -> str:
        return self._address


def fake_signer_factory(key_bytes: bytes, prefix: str) -> FakeSigner:
    if len(key_bytes) != 32:
        raise ValueError("Private key must be 32 bytes")
    return FakeSigner(key_bytes, prefix)


def address_for_key(hex_key: str, prefix: str = "sei") -> str:
    return make_address(prefix, bytes.fromhex(hex_key))


class ScriptedPrompter:
    """Prompter returning canned answers and recording what it was asked"""

    def __init__(
        self,
        signer_index: int = 0,
        collections: Sequence[str] = (TEST_COLLECTION,),
        selection: Optional[List[str]] = None,
        recipients: Sequence[str] = (TEST_RECIPIENT,),
        confirm: bool = True
    ):
        self.signer_index = signer_index
        self.collections = list(collections)
        self.selection = selection
        self.recipients = list(recipients)
        self.confirm = confirm
        self.offered_identities = []
        self.offered_tokens = []
        self.recipient_default = "unset"
        self.confirm_asked = False
        self.messages = []

    def select_signer(self, identities):
        self.offered_identities = list(identities)
        return identities[self.signer_index]

    def ask_collection_address(self, validate):
        return self.collections.pop(0)

    def select_tokens(self, token_ids):
        self.offered_tokens = list(token_ids)
        return list(token_ids) if self.selection is None else self.selection

    def ask_recipient_address(self, default, validate):
        self.recipient_default = default
        return self.recipients.pop(0)

    def confirm_transfer(self, token_ids, recipient):
        self.confirm_asked = True
        return self.confirm

    def announce(self, message):
        self.messages.append(message)


