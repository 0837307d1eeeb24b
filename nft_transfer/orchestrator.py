"""
Transfer run orchestration.

A run walks a fixed sequence of states: choose the signer, enter the
collection, look up owned tokens, select tokens, enter the recipient,
confirm, submit and report. Errors never terminate the process here; they
end the run in the FAILED state and the caller decides the exit code.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Union

from .address import require_valid_address, validate_address_answer
from .chain.session import ChainSession
from .config import TransferConfig
from .exceptions import (
    InvalidAddressError, InvalidSelectionError, NftTransferError, NoTokensOwnedError,
    OperatorAbort
)
from .identity import KeyFile, load_identities
from .identity.types import Identity
from .models import TransactionResult
from .transfer import build_instructions, extract_fee, format_coin, list_owned_tokens, submit

logger = logging.getLogger(__name__)

AddressValidator = Callable[[str], Union[bool, str]]

# Re-prompts allowed for an address the prompter let through unvalidated
MAX_ADDRESS_ATTEMPTS = 3


class RunState(str, Enum):
    """States of a transfer run"""
    SELECT_SIGNER = "select_signer"
    ENTER_COLLECTION = "enter_collection"
    QUERY_OWNERSHIP = "query_ownership"
    SELECT_TOKENS = "select_tokens"
    ENTER_RECIPIENT = "enter_recipient"
    CONFIRM = "confirm"
    SUBMIT = "submit"
    REPORT = "report"

    # Terminal states
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"


class Prompter(Protocol):
    """Operator interaction needed by a run"""

    def select_signer(self, identities: Sequence[Identity]) -> Identity:
        ...

    def ask_collection_address(self, validate: AddressValidator) -> str:
        ...

    def select_tokens(self, token_ids: Sequence[str]) -> List[str]:
        ...

    def ask_recipient_address(self, default: Optional[str], validate: AddressValidator) -> str:
        ...

    def confirm_transfer(self, token_ids: Sequence[str], recipient: str) -> bool:
        ...

    def announce(self, message: str) -> None:
        ...


def confirmation_message(token_ids: Sequence[str], recipient: str) -> str:
    return (
        f"Are you sure you would like to transfer tokens {','.join(token_ids)} "
        f"to address {recipient}"
    )


@dataclass
class RunReport:
    """Outcome of a transfer run"""
    state: RunState
    signer: Optional[str] = None
    collection: Optional[str] = None
    token_ids: List[str] = field(default_factory=list)
    recipient: Optional[str] = None
    result: Optional[TransactionResult] = None
    fee: Optional[str] = None
    formatted_fee: Optional[str] = None
    error: Optional[NftTransferError] = None
    failed_in: Optional[RunState] = None

    @property
    def exit_code(self) -> int:
        return 1 if self.state is RunState.FAILED else 0


class TransferOrchestrator:
    """
    Runs one interactive batch transfer.

    Args:
        config: Run configuration
        prompter: Operator interaction
        key_file: Private key file (defaults to config.key_file)
        session: Chain session (a new one is created per run by default)
        signer_factory: Override for deriving signers from raw keys
        skip_invalid_keys: Skip undecodable keys instead of failing
        logger: Optional logger instance
    """

    def __init__(
        self,
        config: TransferConfig,
        prompter: Prompter,
        key_file: Optional[KeyFile] = None,
        session: Optional[ChainSession] = None,
        signer_factory=None,
        skip_invalid_keys: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.prompter = prompter
        self.key_file = key_file or KeyFile(config.key_file)
        self.session = session or ChainSession(config)
        self.signer_factory = signer_factory
        self.skip_invalid_keys = skip_invalid_keys
        self.logger = logger or logging.getLogger(__name__)
        self.state = RunState.SELECT_SIGNER

    def _enter(self, state: RunState) -> None:
        self.logger.debug(f"Run state: {self.state.value} -> {state.value}")
        self.state = state

    def _ask_address(self, ask: Callable[[], str]) -> str:
        """Ask for an address until it validates, re-prompting on InvalidAddressError"""
        for attempt in range(1, MAX_ADDRESS_ATTEMPTS + 1):
            try:
                return require_valid_address(ask().strip())
            except InvalidAddressError as e:
                if attempt == MAX_ADDRESS_ATTEMPTS:
                    raise
                self.logger.warning(f"Invalid address {e.address!r}, asking again")
                self.prompter.announce(str(e))

    def _fail(self, report: RunReport, error: NftTransferError) -> RunReport:
        self.logger.error(f"Run failed during {self.state.value}: {error}")
        report.failed_in = self.state
        report.error = error
        report.state = RunState.FAILED
        self.state = RunState.FAILED
        return report

    def _cancel(self, report: RunReport) -> RunReport:
        self.logger.info(f"Run cancelled during {self.state.value}")
        report.state = RunState.CANCELLED
        self.state = RunState.CANCELLED
        return report

    def run(self) -> RunReport:
        """
        Execute the run from signer selection to report.

        Returns:
            RunReport with the terminal state; exit_code gives the process status
        """
        self.state = RunState.SELECT_SIGNER
        report = RunReport(state=self.state)
        try:
            return self._run(report)
        except OperatorAbort:
            return self._cancel(report)
        except NftTransferError as e:
            return self._fail(report, e)
        finally:
            self.session.close()

    def _run(self, report: RunReport) -> RunReport:
        identities = load_identities(
            self.key_file,
            self.config.address_prefix,
            signer_factory=self.signer_factory,
            skip_invalid=self.skip_invalid_keys,
        )
        signer = self.prompter.select_signer(identities)
        report.signer = signer.address

        self._enter(RunState.ENTER_COLLECTION)
        collection = self._ask_address(
            lambda: self.prompter.ask_collection_address(validate_address_answer)
        )
        report.collection = collection

        self._enter(RunState.QUERY_OWNERSHIP)
        owned = list_owned_tokens(
            self.session, signer, collection, page_size=self.config.token_page_size
        )
        if not owned:
            raise NoTokensOwnedError("No tokens owned from this collection. Exiting.")

        self._enter(RunState.SELECT_TOKENS)
        selected = list(self.prompter.select_tokens(owned))
        not_owned = [token_id for token_id in selected if token_id not in owned]
        if not_owned:
            raise InvalidSelectionError(f"Tokens not owned by {signer.address}: {', '.join(not_owned)}")
        if not selected:
            self.prompter.announce("No tokens selected.")
            return self._cancel(report)
        report.token_ids = selected

        self._enter(RunState.ENTER_RECIPIENT)
        recipient = self._ask_address(
            lambda: self.prompter.ask_recipient_address(
                self.config.default_recipient, validate_address_answer
            )
        )
        report.recipient = recipient

        self._enter(RunState.CONFIRM)
        if not self.prompter.confirm_transfer(selected, recipient):
            return self._cancel(report)

        self._enter(RunState.SUBMIT)
        instructions = build_instructions(collection, selected, recipient)
        self.prompter.announce(f"Transferring token(s) {', '.join(selected)} to {recipient}")
        result = submit(self.session.client, signer.address, instructions)

        self._enter(RunState.REPORT)
        report.result = result
        report.fee = extract_fee(result)
        if report.fee is not None:
            try:
                report.formatted_fee = format_coin(report.fee, self.config.denomination)
            except ValueError:
                self.logger.warning(f"Unrecognized fee amount: {report.fee}")
                report.formatted_fee = report.fee

        self.state = RunState.COMPLETED
        report.state = RunState.COMPLETED
        return report
