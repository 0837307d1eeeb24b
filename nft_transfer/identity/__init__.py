"""
Identity module for the nft-transfer tool.

This module loads private keys from the local key file and turns them
into signer identities with their on-chain addresses.
"""
import time
import logging
from typing import Callable, List, Optional, Sequence

from nft_transfer.identity.key_file import KeyFile, normalize_keys, DEFAULT_KEY_FILE
from nft_transfer.identity.types import Identity
from nft_transfer.exceptions import InvalidKeyError, NoKeysFoundError
from nft_transfer.signer import Signer

__all__ = [
    'resolve_identities',
    'load_identities',
    'normalize_keys',
    'KeyFile',
    'Identity',
    'DEFAULT_KEY_FILE',
]

logger = logging.getLogger(__name__)

SignerFactory = Callable[[bytes, str], Signer]


def _default_signer_factory() -> SignerFactory:
    from nft_transfer.signer.local import create_local_signer
    return create_local_signer


def _resolve_one(key: str, index: int, prefix: str, signer_factory: SignerFactory) -> Identity:
    """
    Derive a single identity.

    Raises:
        InvalidKeyError: If the key is not hex or the factory rejects it
    """
    try:
        key_bytes = bytes.fromhex(key)
    except ValueError as e:
        raise InvalidKeyError(f"Key #{index + 1} is not valid hex", index=index) from e

    try:
        signer = signer_factory(key_bytes, prefix)
        address = str(signer.address())
    except Exception as e:
        raise InvalidKeyError(f"Key #{index + 1} could not be used: {e}", index=index) from e

    return Identity(address=address, signer=signer, index=index)


def resolve_identities(
    keys: Sequence[str],
    prefix: str,
    signer_factory: Optional[SignerFactory] = None,
    skip_invalid: bool = False
) -> List[Identity]:
    """
    Convert private keys into signer identities, preserving order.

    Args:
        keys: Normalized hex private keys
        prefix: Bech32 prefix for derived addresses (e.g. "sei")
        signer_factory: Callable (key_bytes, prefix) -> Signer
        skip_invalid: Log and skip bad keys instead of failing on the first one

    Returns:
        List of Identity objects

    Raises:
        InvalidKeyError: On the first bad key when skip_invalid is False
        NoKeysFoundError: If no key was usable
    """
    start_time = time.time()
    factory = signer_factory or _default_signer_factory()

    identities = []
    for index, key in enumerate(keys):
        try:
            identities.append(_resolve_one(key, index, prefix, factory))
        except InvalidKeyError as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping key: %s", e)

    if not identities:
        raise NoKeysFoundError("No usable keys in key file! Exiting.")

    elapsed_ms = (time.time() - start_time) * 1000
    logger.debug("Resolved %d identit(ies) in %.2f ms", len(identities), elapsed_ms)
    return identities


def load_identities(
    key_file: KeyFile,
    prefix: str,
    signer_factory: Optional[SignerFactory] = None,
    skip_invalid: bool = False
) -> List[Identity]:
    """Load the key file and resolve every key in it."""
    keys = key_file.load_keys()
    return resolve_identities(keys, prefix, signer_factory=signer_factory, skip_invalid=skip_invalid)
