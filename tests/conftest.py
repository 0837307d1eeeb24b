"""
Pytest fixtures for the nft-transfer tests.
"""
import os

import pytest

from nft_transfer.config import TransferConfig
from nft_transfer.chain.session import ChainSession
from nft_transfer.identity.types import Identity
from tests.test_helpers.stub_transport import StubTransport
from tests.test_helpers import TEST_RPC_URL, TEST_GAS_PRICE, TEST_PRIV_KEY, fake_signer_factory


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Drop NFT_TRANSFER_* overrides and the config file cache between tests"""
    for name in list(os.environ):
        if name.startswith("NFT_TRANSFER_"):
            monkeypatch.delenv(name, raising=False)
    TransferConfig._files_cache.clear()
    yield
    TransferConfig._files_cache.clear()


@pytest.fixture
def test_config():
    return TransferConfig(
        RPC_ENDPOINT=TEST_RPC_URL,
        CHAIN_ID="test-1",
        GAS_PRICE=TEST_GAS_PRICE,
        DEFAULT_RECIPIENT="",
    )


@pytest.fixture
def signer_identity():
    signer = fake_signer_factory(bytes.fromhex(TEST_PRIV_KEY), "sei")
    return Identity(address=signer.address(), signer=signer, index=0)


@pytest.fixture
def stub_transport():
    return StubTransport(fee="500usei")


@pytest.fixture
def stub_session(test_config, stub_transport):
    return ChainSession(test_config, transport_factory=lambda config: stub_transport)


@pytest.fixture
def key_file_path(tmp_path):
    """Key file with one valid key and one blank line"""
    path = tmp_path / "privatekeys.txt"
    path.write_text(f"0x{TEST_PRIV_KEY}\n\n", encoding="utf-8")
    os.chmod(path, 0o600)
    return path
