"""
Signer interface for the nft-transfer tool.
"""
from typing import Any, Protocol

__all__ = ['Signer']


class Signer(Protocol):
    """Protocol for signing capabilities bound to one account"""

    def address(self) -> Any:
        """Bech32 account address (str() gives the text form)"""
        ...
