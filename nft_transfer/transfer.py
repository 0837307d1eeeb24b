"""
Batch transfer pipeline: ownership lookup, instruction building,
submission and fee reporting.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from .chain.session import ChainSession
from .chain.transport import AUTO_FEE, ChainTransport, FeeMode
from .config import CoinDenomination
from .exceptions import ChainQueryError, TransferFailedError
from .identity.types import Identity
from .models import TransferInstruction, TransferMsg, TransferNft, TransactionResult

logger = logging.getLogger(__name__)

SEI = CoinDenomination(unit="usei", symbol="SEI", scale=1_000_000)


def list_owned_tokens(
    session: ChainSession,
    identity: Identity,
    collection: str,
    page_size: int = 30
) -> List[str]:
    """
    Retrieve the token ids of a collection owned by an identity.

    Connects the session for the identity if this is the first chain call
    of the run, then pages through the cw721 ``tokens`` query until a page
    comes back empty. Contracts may cap the page below ``page_size``, so a
    short page does not end the listing.

    Args:
        session: The run's chain session
        identity: Owner whose tokens are listed
        collection: Collection contract address
        page_size: Tokens requested per query

    Returns:
        Token ids in contract order (possibly empty)

    Raises:
        ChainQueryError: If the contract response has no token list or the
            pagination cursor does not advance
    """
    client = session.connect(identity)

    tokens: List[str] = []
    start_after: Optional[str] = None
    while True:
        query = {"tokens": {"owner": identity.address, "limit": page_size}}
        if start_after is not None:
            query["tokens"]["start_after"] = start_after
        response = client.query_contract_smart(collection, query)

        page = response.get("tokens") if isinstance(response, dict) else None
        if not isinstance(page, list):
            raise ChainQueryError(f"Unexpected tokens response: {response}")
        if not page:
            break
        tokens.extend(str(token_id) for token_id in page)

        last = str(page[-1])
        if last == start_after:
            raise ChainQueryError(f"Token pagination did not advance past {start_after}")
        start_after = last

    logger.info(f"{identity.address} owns {len(tokens)} token(s) in {collection}")
    return tokens


def build_instructions(
    collection: str,
    token_ids: Sequence[str],
    recipient: str
) -> List[TransferInstruction]:
    """
    Build one transfer_nft execute message per token id, in order.

    Args:
        collection: Collection contract address
        token_ids: Token ids to transfer
        recipient: Address receiving the tokens

    Returns:
        List of TransferInstruction
    """
    return [
        TransferInstruction(
            contractAddress=collection,
            msg=TransferMsg(transfer_nft=TransferNft(recipient=recipient, token_id=token_id)),
        )
        for token_id in token_ids
    ]


def submit(
    client: ChainTransport,
    signer_address: str,
    instructions: Sequence[TransferInstruction],
    fee: FeeMode = AUTO_FEE
) -> TransactionResult:
    """
    Send a batch of instructions as one transaction and wait for inclusion.

    Args:
        client: Connected chain transport
        signer_address: Address authorizing the transaction
        instructions: Non-empty batch of execute messages
        fee: "auto" for simulated gas, or an explicit gas limit

    Returns:
        TransactionResult of the included transaction

    Raises:
        ValueError: If the batch is empty
        TransferFailedError: If the transaction fails for any reason
    """
    if not instructions:
        raise ValueError("Refusing to submit an empty transfer batch")

    try:
        result = client.execute_multiple(signer_address, instructions, fee)
    except TransferFailedError:
        raise
    except Exception as e:
        logger.error(f"Transfer transaction failed: {e}")
        raise TransferFailedError(str(e)) from e

    logger.info(f"Transaction included: {result.transaction_hash}")
    return result


def extract_fee(result: TransactionResult) -> Optional[str]:
    """
    Retrieve the fee amount from a transaction's events.

    Scans "tx" events in order and returns the first "fee" attribute.

    Args:
        result: The transaction result

    Returns:
        Fee coin string such as "4396usei", or None if the events carry no fee
    """
    for event in result.events:
        if event.type == "tx" and event.attributes is not None:
            for attribute in event.attributes:
                if attribute.key == "fee":
                    return attribute.value
    return None


def format_coin(coin: str, denomination: CoinDenomination = SEI) -> str:
    """
    Format a smallest-unit coin string for display.

    Args:
        coin: Amount with unit suffix, e.g. "4396usei"
        denomination: Unit, display symbol and scale factor

    Returns:
        Display string, e.g. "0.004396 SEI"

    Raises:
        ValueError: If the amount is not a number
    """
    magnitude = coin.strip()
    if magnitude.endswith(denomination.unit):
        magnitude = magnitude[:-len(denomination.unit)]
    try:
        value = Decimal(magnitude or "0") / Decimal(denomination.scale)
    except InvalidOperation as e:
        raise ValueError(f"Invalid coin amount: {coin!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid coin amount: {coin!r}")
    return f"{format(value.normalize(), 'f')} {denomination.symbol}"
