"""
Per-run chain session.
"""
import logging
from typing import Callable, Optional

from ..config import TransferConfig
from ..exceptions import ChainConnectionError
from ..identity.types import Identity
from .transport import ChainTransport

logger = logging.getLogger(__name__)


def _cosmpy_transport_factory(config: TransferConfig) -> ChainTransport:
    from .cosmpy_transport import CosmpyTransport
    return CosmpyTransport(
        chain_id=config.chain_id,
        timeout=config.query_timeout,
        retry_count=config.retry_count,
        tx_timeout=config.tx_timeout,
        poll_interval=config.poll_interval,
    )


class ChainSession:
    """
    Holds the single chain client of one transfer run.

    The client is created lazily on first use and bound to one signer;
    the ownership query and the submitter share it.

    Args:
        config: Run configuration
        transport_factory: Callable building an uninitialized transport
    """

    def __init__(
        self,
        config: TransferConfig,
        transport_factory: Optional[Callable[[TransferConfig], ChainTransport]] = None
    ):
        self.config = config
        self.transport_factory = transport_factory or _cosmpy_transport_factory
        self._client: Optional[ChainTransport] = None
        self._signer_address: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self, identity: Identity) -> ChainTransport:
        """
        Return the run's client, connecting it for the identity if needed.

        Raises:
            ChainConnectionError: If the session is already bound to another signer
        """
        if self._client is not None:
            if identity.address != self._signer_address:
                raise ChainConnectionError(
                    f"Session is bound to {self._signer_address}, not {identity.address}"
                )
            return self._client

        client = self.transport_factory(self.config)
        client.initialize(self.config.rpc_endpoint, identity.signer, self.config.gas_price)
        self._client = client
        self._signer_address = identity.address
        logger.debug("Chain session connected for %s", identity.address)
        return client

    @property
    def client(self) -> ChainTransport:
        if self._client is None:
            raise ChainConnectionError("Chain session is not connected")
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._signer_address = None

    def __enter__(self) -> "ChainSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
