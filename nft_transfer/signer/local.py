"""
Local secp256k1 signer backed by cosmpy.
"""
from cosmpy.aerial.wallet import LocalWallet
from cosmpy.crypto.keypairs import PrivateKey


def create_local_signer(key_bytes: bytes, prefix: str) -> LocalWallet:
    """
    Create a wallet able to sign for the account derived from a raw key.

    Args:
        key_bytes: 32-byte secp256k1 private key
        prefix: Bech32 prefix of the chain's account addresses

    Returns:
        cosmpy LocalWallet

    Raises:
        ValueError: If the key is not a valid secp256k1 private key
    """
    if len(key_bytes) != 32:
        raise ValueError(f"Private key must be 32 bytes, got {len(key_bytes)}")
    return LocalWallet(PrivateKey(key_bytes), prefix=prefix)
