"""
Command-line entry point for nft-transfer.
"""
import argparse
import logging
import sys
from typing import List, Optional, Sequence

import questionary
from rich.console import Console
from rich.logging import RichHandler

from .config import TransferConfig
from .exceptions import ConfigError, MissingKeyFileError, OperatorAbort, TransferFailedError
from .identity import KeyFile
from .identity.types import Identity
from .orchestrator import (
    AddressValidator, RunReport, RunState, TransferOrchestrator, confirmation_message
)
from .version import __version__

console = Console()
error_console = Console(stderr=True)


def _answer(question: questionary.Question):
    answer = question.ask()
    if answer is None:
        raise OperatorAbort("Prompt interrupted")
    return answer


class QuestionaryPrompter:
    """Interactive prompts for a transfer run"""

    def select_signer(self, identities: Sequence[Identity]) -> Identity:
        return _answer(questionary.select(
            "Which wallet would you like to use?",
            choices=[questionary.Choice(title=i.address, value=i) for i in identities],
        ))

    def ask_collection_address(self, validate: AddressValidator) -> str:
        return _answer(questionary.text("What is the collection address?", validate=validate))

    def select_tokens(self, token_ids: Sequence[str]) -> List[str]:
        return _answer(questionary.checkbox(
            "Which tokens would you like to transfer?",
            choices=list(token_ids),
        ))

    def ask_recipient_address(self, default: Optional[str], validate: AddressValidator) -> str:
        return _answer(questionary.text(
            "What is the recipient address?",
            default=default or "",
            validate=validate,
        ))

    def confirm_transfer(self, token_ids: Sequence[str], recipient: str) -> bool:
        return _answer(questionary.confirm(confirmation_message(token_ids, recipient), default=False))

    def announce(self, message: str) -> None:
        console.print(message, markup=False, highlight=False)


def render_report(report: RunReport) -> None:
    """Print the outcome of a run"""
    if report.state is RunState.CANCELLED:
        console.print("[red]! Transfer canceled. Exiting.[/red]")
        return

    if report.state is RunState.COMPLETED:
        console.print("[green]✓ Transfer successful![/green]")
        console.print(f"[green]✓[/green] Transaction id: [cyan]{report.result.transaction_hash}[/cyan]")
        console.print(f"[green]✓[/green] Transaction fee: [cyan]{report.formatted_fee or 'unknown'}[/cyan]")
        return

    error = report.error
    if isinstance(error, TransferFailedError):
        error_console.print("! Transfer failed!", style="red", markup=False)
    error_console.print(str(error), style="red", markup=False)
    if isinstance(error, MissingKeyFileError):
        error_console.print(error.hint, markup=False)


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nft-transfer",
        description="Transfer NFTs from a locally held wallet to a recipient address.",
    )
    parser.add_argument("--config", help="Path to the JSON config file (default: config/default.json)")
    parser.add_argument("--key-file", help="Path to the private key file (default: from config)")
    parser.add_argument("--skip-invalid-keys", action="store_true",
                        help="Skip keys that cannot be decoded instead of aborting")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase log verbosity (-v info, -vv debug)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run one transfer and return the process exit code.

    Returns:
        0 when the transfer completed or was cancelled, 1 on any error
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = TransferConfig.load(args.config)
    except ConfigError as e:
        error_console.print(str(e), style="red", markup=False)
        return 1

    orchestrator = TransferOrchestrator(
        config,
        QuestionaryPrompter(),
        key_file=KeyFile(args.key_file or config.key_file),
        skip_invalid_keys=args.skip_invalid_keys,
    )
    report = orchestrator.run()
    render_report(report)
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
