"""
Data types for the identity module.
"""
from dataclasses import dataclass, field

from nft_transfer.signer import Signer


@dataclass
class Identity:
    """
    Represents an account that can authorize a transfer.

    Attributes:
        address: Bech32 account address
        signer: Signer implementation for this account
        index: Position of the key among the loaded keys
    """
    address: str
    signer: Signer = field(repr=False)
    index: int = 0
