"""CLI commands, with remote collaborators swapped for mocks."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from pinclaim import cli as cli_module
from pinclaim.cli import cli
from pinclaim.errors import ClaimGenerationError

from tests.conftest import TEST_FILENAME
from tests.factories import TEST_CID, make_raw_claim
from tests.mocks import MockGenerator, MockPinService, MockWalletLoader


@pytest.fixture
def env(tmp_path, files_dir, monkeypatch):
    """Isolated HOME, files dir and journal for each CLI run."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("PINCLAIM_FILES_DIR", str(files_dir))
    monkeypatch.setenv("PINCLAIM_DB_PATH", str(tmp_path / "claims.db"))
    monkeypatch.delenv("PINCLAIM_SIGNER", raising=False)
    return tmp_path


@pytest.fixture
def patched(env, monkeypatch, funded_wallet):
    """Route the CLI's service, wallet and generator to mocks."""
    service = MockPinService(records={TEST_CID: make_raw_claim()})
    loader = MockWalletLoader(funded_wallet)
    generator = MockGenerator()
    monkeypatch.setenv("PINCLAIM_SIGNER", "tests.mocks:MockSigner")
    monkeypatch.setattr(cli_module, "_service", lambda cfg: service)
    monkeypatch.setattr(cli_module, "_wallet_loader", lambda cfg: loader)
    monkeypatch.setattr(cli_module, "_generator", lambda cfg: generator)
    return service, loader, generator


def _run(*args):
    return CliRunner().invoke(cli, list(args))


def test_config_command(env):
    result = _run("config")
    assert result.exit_code == 0
    assert "http://localhost:5031" in result.output
    assert "(not set)" in result.output


def test_bad_config_path_exits_1(env):
    result = _run("--config", str(env / "missing.toml"), "config")
    assert result.exit_code == 1
    assert "Config file not found" in result.output


@pytest.mark.parametrize(
    "args, message",
    [
        (["pin-claim-file", "-n", "alice"], "-f flag"),
        (["pin-claim-file", "-f", TEST_FILENAME], "-n flag"),
        (["pin-renew", "-n", "alice"], "-c flag"),
        (["pin-renew", "-c", TEST_CID], "-n flag"),
        (["pin-status"], "-c flag"),
        (["pin-upload"], "-f flag"),
        (["reprocess"], "-c flag"),
        (["pin-claim", "-t", "t", "-f", "f", "-a", "a", "-c", "c"], "-p flag"),
    ],
)
def test_missing_arguments_exit_1(patched, args, message):
    service, loader, generator = patched
    result = _run(*args)
    assert result.exit_code == 1
    assert message in result.output
    assert service.upload_calls == []
    assert service.submit_calls == []
    assert generator.calls == []


def test_pin_status_prints_record_with_times(patched):
    result = _run("pin-status", "-c", TEST_CID)

    assert result.exit_code == 0
    body = result.output[: result.output.rindex("}") + 1]
    data = json.loads(body)
    assert data["cid"] == TEST_CID
    assert data["expirationTime"] == "2024-11-14T22:13:20.000Z"
    assert "has expired" in result.output


def test_pin_claim_file_then_history(patched):
    service, _, _ = patched

    result = _run("pin-claim-file", "-f", TEST_FILENAME, "-n", "alice")
    assert result.exit_code == 0, result.output
    assert "Pin claim submitted successfully!" in result.output
    assert "pob_tx_abc123" in result.output
    assert "claim_tx_def456" in result.output

    history = _run("claim-history")
    assert history.exit_code == 0
    assert "notified" in history.output
    assert service.upload_cid in history.output

    orphaned = _run("claim-history", "--orphaned")
    assert "No claims recorded." in orphaned.output


def test_notification_failure_prints_txids(patched):
    service, _, _ = patched
    service.submit_success = False
    service.submit_message = "duplicate cid"

    result = _run("pin-claim-file", "-f", TEST_FILENAME, "-n", "alice")

    assert result.exit_code == 1
    assert "duplicate cid" in result.output
    assert "pob_tx_abc123" in result.output
    assert "claim_tx_def456" in result.output
    assert f"pinclaim reprocess -c {service.upload_cid}" in result.output

    orphaned = _run("claim-history", "--orphaned")
    assert "notify_failed" in orphaned.output


def test_pin_renew(patched):
    _, _, generator = patched
    result = _run("pin-renew", "-c", TEST_CID, "-n", "alice")

    assert result.exit_code == 0, result.output
    assert "Pin claim renewed successfully!" in result.output
    assert generator.calls == [(TEST_CID, "test.json", 2.5)]


def test_pin_claim_submits_given_fields(patched):
    service, _, _ = patched
    result = _run(
        "pin-claim", "-p", "pob_x", "-t", "claim_x", "-f", "x.txt", "-a", "bitcoincash:qx", "-c", "bafx",
    )

    assert result.exit_code == 0, result.output
    [submission] = service.submit_calls
    assert submission.proof_of_burn_txid == "pob_x"
    assert submission.claim_txid == "claim_x"
    assert submission.cid == "bafx"


def test_unprocessed_pins_empty(patched):
    result = _run("unprocessed-pins")
    assert result.exit_code == 0
    assert "No unprocessed pin claims." in result.output


def test_pin_upload_missing_file(patched):
    result = _run("pin-upload", "-f", "nope.json")
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_claim_history_empty(env):
    result = _run("claim-history")
    assert result.exit_code == 0
    assert "No claims recorded." in result.output


def test_paid_commands_need_a_signer_before_upload(patched, monkeypatch):
    service, _, generator = patched
    monkeypatch.delenv("PINCLAIM_SIGNER")

    result = _run("pin-claim-file", "-f", TEST_FILENAME, "-n", "alice")
    assert result.exit_code == 1
    assert "No transaction signer configured" in result.output
    assert service.upload_calls == []

    renew = _run("pin-renew", "-c", TEST_CID, "-n", "alice")
    assert renew.exit_code == 1
    assert "No transaction signer configured" in renew.output
    assert service.status_calls == []
    assert generator.calls == []


def test_unexpected_failure_prints_error_and_exits_1(patched, monkeypatch):
    broken = MockGenerator(error=RuntimeError("signer node down"))
    monkeypatch.setattr(cli_module, "_generator", lambda cfg: broken)

    result = _run("pin-claim-file", "-f", TEST_FILENAME, "-n", "alice")

    assert result.exit_code == 1
    assert "Error in pin-claim-file: RuntimeError: signer node down" in result.output


def test_burn_without_claim_prints_burn_txid(patched, monkeypatch):
    failing = MockGenerator(error=ClaimGenerationError("claim not broadcast", "pob_lost_txid"))
    monkeypatch.setattr(cli_module, "_generator", lambda cfg: failing)

    result = _run("pin-claim-file", "-f", TEST_FILENAME, "-n", "alice")

    assert result.exit_code == 1
    assert "pob_lost_txid" in result.output

    orphaned = _run("claim-history", "--orphaned")
    assert "burned" in orphaned.output
    assert "pob=pob_lost_txid" in orphaned.output
