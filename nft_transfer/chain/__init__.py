"""
Chain client module for the nft-transfer tool.

This module provides the transport abstraction used to query CosmWasm
contracts and submit transactions, and the per-run session that owns
the single connected client.
"""
from .transport import ChainTransport, FeeMode, AUTO_FEE
from .session import ChainSession

__all__ = ['ChainTransport', 'ChainSession', 'FeeMode', 'AUTO_FEE']
