"""
Transport layer for the chain client.

This module provides an abstraction over the network client used to
query CosmWasm contracts and broadcast execute transactions, so the
transfer pipeline does not depend on a concrete client library.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence, Union

from ..models import TransferInstruction, TransactionResult
from ..signer import Signer

# Configure logger
logger = logging.getLogger(__name__)

# Fee mode: "auto" simulates the transaction, an int is an explicit gas limit
FeeMode = Union[str, int]
AUTO_FEE = "auto"


class ChainTransport(ABC):
    """
    Abstract base class for chain client implementations.

    One transport instance is bound to a single signer for the lifetime
    of a transfer run.
    """

    @abstractmethod
    def initialize(self, endpoint: str, signer: Signer, gas_price: str) -> None:
        """
        Connect the transport to an endpoint on behalf of a signer.

        Args:
            endpoint: Chain REST endpoint URL
            signer: Signer that will authorize transactions
            gas_price: Gas price such as "0.1usei"

        Raises:
            ChainConnectionError: If connection initialization fails
        """
        pass

    @abstractmethod
    def query_contract_smart(self, contract_address: str, query: Dict[str, Any]) -> Any:
        """
        Run a smart query against a contract.

        Args:
            contract_address: Bech32 contract address
            query: JSON query message

        Returns:
            Decoded JSON response

        Raises:
            ChainQueryError: If the query fails
        """
        pass

    @abstractmethod
    def execute_multiple(
        self,
        sender_address: str,
        instructions: Sequence[TransferInstruction],
        fee: FeeMode = AUTO_FEE
    ) -> TransactionResult:
        """
        Execute several contract messages in one transaction and wait for inclusion.

        Args:
            sender_address: Address of the signer authorizing the transaction
            instructions: Execute messages, applied in order
            fee: "auto" to estimate gas by simulation, or a gas limit

        Returns:
            Result of the included transaction
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close any open connections or resources."""
        pass
