"""
cosmpy-based transport implementation for CosmWasm chains.

Smart queries go straight to the chain's REST (LCD) endpoint through a
retrying HTTP session; signing, gas simulation, broadcast and inclusion
polling are delegated to cosmpy's LedgerClient.
"""
import json
import base64
import logging
import urllib.parse
from typing import Any, Dict, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from cosmpy.aerial.client import LedgerClient, NetworkConfig
from cosmpy.aerial.client.utils import prepare_and_broadcast_basic_transaction
from cosmpy.aerial.contract.cosmwasm import create_cosmwasm_execute_msg
from cosmpy.aerial.tx import Transaction
from cosmpy.crypto.address import Address
from cosmpy.protos.cosmos.tx.v1beta1.service_pb2 import GetTxRequest

from ..config import parse_gas_price
from ..exceptions import ChainConnectionError, ChainQueryError
from ..models import EventAttribute, TransferInstruction, TransactionResult, TxEvent
from ..signer import Signer
from .transport import AUTO_FEE, ChainTransport, FeeMode

# Configure logger
logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Event keys and values are bytes on older nodes and str on newer ones"""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def convert_tx_events(raw_events: Sequence[Any]) -> list:
    """
    Convert protobuf ABCI events to TxEvent models, keeping order.

    Args:
        raw_events: Events from a TxResponse

    Returns:
        List of TxEvent
    """
    events = []
    for raw in raw_events:
        attributes = [
            EventAttribute(key=_text(attr.key), value=_text(attr.value))
            for attr in raw.attributes
        ]
        events.append(TxEvent(type=raw.type, attributes=attributes))
    return events


class CosmpyTransport(ChainTransport):
    """
    Chain transport backed by cosmpy and the REST endpoint.

    Args:
        chain_id: Chain identifier used when signing
        timeout: Timeout for HTTP queries in seconds
        retry_count: Number of retries for HTTP queries
        tx_timeout: Seconds to wait for a transaction to be included
        poll_interval: Seconds between inclusion polls
        logger: Optional logger instance to use for debug/info logging
    """

    def __init__(
        self,
        chain_id: str,
        timeout: float = 30,
        retry_count: int = 3,
        tx_timeout: float = 120,
        poll_interval: float = 1,
        logger: Optional[logging.Logger] = None
    ):
        self.chain_id = chain_id
        self.timeout = timeout
        self.tx_timeout = tx_timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

        self.endpoint: Optional[str] = None
        self.signer: Optional[Signer] = None
        self.ledger: Optional[LedgerClient] = None

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
            # Retry for connection errors and read timeouts
            connect=retry_count,
            read=retry_count,
            other=retry_count
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def initialize(self, endpoint: str, signer: Signer, gas_price: str) -> None:
        try:
            amount, denom = parse_gas_price(gas_price)
            network = NetworkConfig(
                chain_id=self.chain_id,
                url=f"rest+{endpoint}",
                fee_minimum_gas_price=float(amount),
                fee_denomination=denom,
                staking_denomination=denom,
            )
            self.ledger = LedgerClient(
                network,
                query_interval_secs=max(1, int(self.poll_interval)),
                query_timeout_secs=max(1, int(self.tx_timeout)),
            )
        except Exception as e:
            self.logger.error(f"Failed to connect to {endpoint}: {e}")
            raise ChainConnectionError(f"Failed to connect to {endpoint}: {e}") from e

        self.endpoint = endpoint.rstrip('/')
        self.signer = signer
        self.logger.info(f"Connected to {self.endpoint} (chain {self.chain_id}, gas price {gas_price})")

    def _require_connected(self) -> LedgerClient:
        if self.ledger is None or self.endpoint is None:
            raise ChainConnectionError("Transport not initialized")
        return self.ledger

    def query_contract_smart(self, contract_address: str, query: Dict[str, Any]) -> Any:
        self._require_connected()
        query_data = base64.b64encode(
            json.dumps(query, separators=(',', ':')).encode('utf-8')
        ).decode('ascii')
        url = (
            f"{self.endpoint}/cosmwasm/wasm/v1/contract/"
            f"{urllib.parse.quote(contract_address, safe='')}/smart/"
            f"{urllib.parse.quote(query_data, safe='')}"
        )
        self.logger.debug(f"Querying {contract_address}: {query}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Contract query request failed: {e}")
            raise ChainQueryError(f"Contract query failed: {str(e)}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise ChainQueryError(
                f"Invalid JSON response from {self.endpoint} (HTTP {response.status_code})"
            ) from e

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise ChainQueryError(
                f"Contract query failed (HTTP {response.status_code}): {message or body}"
            )

        if not isinstance(body, dict) or "data" not in body:
            raise ChainQueryError(f"Missing data in query response: {body}")
        return body["data"]

    def execute_multiple(
        self,
        sender_address: str,
        instructions: Sequence[TransferInstruction],
        fee: FeeMode = AUTO_FEE
    ) -> TransactionResult:
        ledger = self._require_connected()
        if sender_address != str(self.signer.address()):
            raise ValueError(f"Transport is bound to {self.signer.address()}, not {sender_address}")

        sender = Address(sender_address)
        tx = Transaction()
        for instruction in instructions:
            tx.add_message(create_cosmwasm_execute_msg(
                sender,
                Address(instruction.contract_address),
                instruction.execute_msg(),
            ))

        gas_limit = None if fee == AUTO_FEE else int(fee)
        submitted = prepare_and_broadcast_basic_transaction(ledger, tx, self.signer, gas_limit=gas_limit)
        self.logger.info(f"Transaction broadcast: {submitted.tx_hash}")

        submitted.wait_to_complete()
        submitted.response.ensure_successful()
        return self.fetch_result(submitted.tx_hash)

    def fetch_result(self, tx_hash: str) -> TransactionResult:
        """
        Look up an included transaction and its ordered event log.

        Args:
            tx_hash: Transaction hash

        Returns:
            TransactionResult
        """
        ledger = self._require_connected()
        response = ledger.txs.GetTx(GetTxRequest(hash=tx_hash))
        tx_response = response.tx_response
        return TransactionResult(
            transactionHash=tx_response.txhash or tx_hash,
            height=int(tx_response.height),
            gasUsed=int(tx_response.gas_used),
            events=convert_tx_events(tx_response.events),
        )

    def close(self) -> None:
        self.session.close()
        self.ledger = None
