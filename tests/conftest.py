"""Shared fixtures for pinclaim tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pinclaim.claims.orchestrator import PinClaimOrchestrator
from pinclaim.claims.renewal import RenewalCoordinator
from pinclaim.claims.reprocess import ReprocessingCoordinator
from pinclaim.claims.status import PinStatusResolver
from pinclaim.models.config import ClientConfig
from pinclaim.storage.sqlite import SQLiteClaimJournal

from tests.factories import TEST_CID, make_raw_claim, make_token_utxo, make_token_utxos
from tests.mocks import MockGenerator, MockPinService, MockWallet, MockWalletLoader

TEST_FILENAME = "test.json"
TEST_FILE_BYTES = 2 * 1024 * 1024  # exactly 2 binary megabytes


def make_test_config(**overrides) -> ClientConfig:
    """Build a ClientConfig suitable for testing."""
    defaults = dict(
        pin_service_url="http://127.0.0.1:5031",
        wallet_url="http://127.0.0.1:5005",
        wallets_dir="/nonexistent/wallets",
        files_dir="/nonexistent/files",
        max_upload_size=10_000_000,
        db_path=":memory:",
    )
    defaults.update(overrides)
    return ClientConfig(**defaults)


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    """A files directory holding one 2 MiB test file."""
    d = tmp_path / "files"
    d.mkdir()
    (d / TEST_FILENAME).write_bytes(b"\x00" * TEST_FILE_BYTES)
    return d


@pytest.fixture
def test_config(files_dir: Path) -> ClientConfig:
    return make_test_config(files_dir=str(files_dir))


@pytest.fixture
async def journal():
    """Initialized in-memory SQLiteClaimJournal."""
    j = SQLiteClaimJournal(":memory:")
    await j.initialize()
    yield j
    await j.close()


@pytest.fixture
def mock_service():
    return MockPinService(records={TEST_CID: make_raw_claim()})


@pytest.fixture
def funded_wallet():
    return MockWallet(token_utxos=make_token_utxos(type1=[make_token_utxo(qty="10")]))


@pytest.fixture
def wallet_loader(funded_wallet):
    return MockWalletLoader(funded_wallet)


@pytest.fixture
def mock_generator():
    return MockGenerator()


@pytest.fixture
def orchestrator(test_config, mock_service, wallet_loader, mock_generator, journal):
    """PinClaimOrchestrator wired to mocked collaborators."""
    return PinClaimOrchestrator(
        test_config, mock_service, wallet_loader, mock_generator, journal=journal,
    )


@pytest.fixture
def renewal(test_config, mock_service, wallet_loader, mock_generator, journal):
    """RenewalCoordinator wired to mocked collaborators."""
    return RenewalCoordinator(
        test_config,
        PinStatusResolver(mock_service),
        wallet_loader,
        mock_generator,
        journal=journal,
    )


@pytest.fixture
def reprocessor(mock_service, journal):
    return ReprocessingCoordinator(mock_service, journal)


# ── Local fake pinning service (real HTTP) ──────────────────────


class FakeServiceState:
    """What the fake pinning service knows and what it was sent."""

    def __init__(self) -> None:
        self.records: dict[str, dict] = {}
        self.claim_response: dict = {"success": True, "message": "claim recorded"}
        self.claim_status = 200
        self.upload_response: dict = {"success": True, "cid": "bafkreifakeuploadcid"}
        self.claims: list[dict] = []
        self.uploads: list[tuple[str, bytes]] = []
        self.utxo_requests: list[dict] = []
        self.utxo_response: list[dict] = []


@pytest.fixture
async def fake_service():
    """Local HTTP server speaking the pinning service and consumer APIs.

    Returns (base_url, state).
    """
    state = FakeServiceState()

    async def pin_status(request):
        cid = request.match_info["cid"]
        if cid not in state.records:
            return web.json_response({"success": False, "message": f"CID {cid} not found"}, status=404)
        return web.json_response(state.records[cid])

    async def pin_claim(request):
        state.claims.append(await request.json())
        return web.json_response(state.claim_response, status=state.claim_status)

    async def unprocessed(request):
        return web.json_response(
            [r for r in state.records.values() if "validClaim" in r and r["validClaim"] is None]
        )

    async def pin_local_file(request):
        data = await request.post()
        field = data["file"]
        state.uploads.append((field.filename, field.file.read()))
        return web.json_response(state.upload_response)

    async def utxos(request):
        state.utxo_requests.append(await request.json())
        return web.json_response(state.utxo_response)

    app = web.Application()
    app.router.add_get("/ipfs/pin-status/{cid}", pin_status)
    app.router.add_post("/ipfs/pin-claim/", pin_claim)
    app.router.add_get("/ipfs/unprocessed-pins", unprocessed)
    app.router.add_post("/ipfs/pin-local-file/", pin_local_file)
    app.router.add_post("/bch/utxos", utxos)

    server = TestServer(app)
    await server.start_server()
    yield str(server.make_url("")).rstrip("/"), state
    await server.close()
