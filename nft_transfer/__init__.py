"""
nft-transfer - move NFTs from locally held wallets on CosmWasm chains.
"""
from .address import is_valid_address
from .config import TransferConfig, CoinDenomination, parse_gas_price
from .exceptions import (
    NftTransferError, ConfigError, MissingKeyFileError, KeyFileLockedError, NoKeysFoundError,
    InvalidKeyError, InvalidAddressError, ChainConnectionError, ChainQueryError,
    NoTokensOwnedError, InvalidSelectionError, TransferFailedError, OperatorAbort
)
from .identity import Identity, KeyFile, normalize_keys, resolve_identities
from .models import TransferInstruction, TransactionResult, TxEvent, EventAttribute
from .orchestrator import TransferOrchestrator, RunReport, RunState
from .transfer import list_owned_tokens, build_instructions, submit, extract_fee, format_coin
from .chain import ChainSession, ChainTransport
from .version import __version__

__all__ = [
    "is_valid_address",
    "TransferConfig",
    "CoinDenomination",
    "parse_gas_price",
    "NftTransferError",
    "ConfigError",
    "MissingKeyFileError",
    "KeyFileLockedError",
    "NoKeysFoundError",
    "InvalidKeyError",
    "InvalidAddressError",
    "ChainConnectionError",
    "ChainQueryError",
    "NoTokensOwnedError",
    "InvalidSelectionError",
    "TransferFailedError",
    "OperatorAbort",
    "Identity",
    "KeyFile",
    "normalize_keys",
    "resolve_identities",
    "TransferInstruction",
    "TransactionResult",
    "TxEvent",
    "EventAttribute",
    "TransferOrchestrator",
    "RunReport",
    "RunState",
    "list_owned_tokens",
    "build_instructions",
    "submit",
    "extract_fee",
    "format_coin",
    "ChainSession",
    "ChainTransport",
    "__version__",
]
