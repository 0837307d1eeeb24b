"""
Exceptions for the nft-transfer tool.
"""
from typing import Optional


class NftTransferError(Exception):
    """Base exception for all transfer-run errors."""
    pass


class ConfigError(NftTransferError):
    """Raised when the configuration cannot be loaded or is invalid."""
    pass


class MissingKeyFileError(NftTransferError):
    """Raised when the private key file cannot be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)

    @property
    def hint(self) -> str:
        name = self.path or "privatekeys.txt"
        return f"Place private keys (one per line) in a file named {name}."


class KeyFileLockedError(NftTransferError):
    """Raised when another process holds an exclusive lock on the key file."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class NoKeysFoundError(NftTransferError):
    """Raised when the key file holds no usable keys."""
    pass


class InvalidKeyError(NftTransferError):
    """Raised when a private key cannot be decoded or turned into a signer."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class InvalidAddressError(NftTransferError):
    """Raised when an address is not valid bech32."""

    def __init__(self, address: str):
        self.address = address
        super().__init__("Address is not valid.")


class ChainConnectionError(NftTransferError):
    """Raised when the chain client cannot be created or is not connected."""
    pass


class ChainQueryError(NftTransferError):
    """Raised when a smart-contract query fails or returns unexpected data."""
    pass


class NoTokensOwnedError(NftTransferError):
    """Raised when the signer owns no tokens in the collection."""
    pass


class InvalidSelectionError(NftTransferError):
    """Raised when the selected token ids are not owned by the signer."""
    pass


class TransferFailedError(NftTransferError):
    """Raised when the transfer transaction fails."""
    pass


class OperatorAbort(NftTransferError):
    """Raised by a prompter when the operator interrupts a question."""
    pass
