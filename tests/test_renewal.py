"""Pin claim renewal."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pytest

from pinclaim.claims.renewal import DECIMAL_MEGABYTE, RenewalCoordinator
from pinclaim.claims.status import PinStatusResolver
from pinclaim.errors import (
    ClaimGenerationError,
    InsufficientFunds,
    MissingArgument,
    MissingExpiration,
    WalletError,
)
from pinclaim.models.config import PSF_TOKEN_ID
from pinclaim.wallet.generator import BurnClaimGenerator

from tests.factories import TEST_CID, make_raw_claim, make_token_utxo, make_token_utxos
from tests.mocks import MockPinService, MockWallet, MockWalletLoader

AFTER_EXPIRY = datetime(2025, 1, 1, tzinfo=timezone.utc)
BEFORE_EXPIRY = datetime(2024, 6, 1, tzinfo=timezone.utc)


async def test_renew_expired_claim(renewal, mock_generator, wallet_loader, journal):
    result = await renewal.renew(TEST_CID, "test-wallet", now=AFTER_EXPIRY)

    assert result.expired
    assert result.cid == TEST_CID
    assert result.pob_txid == "pob_tx_abc123"
    assert result.claim_txid == "claim_tx_def456"
    assert result.previous_expiration == "2024-11-14T22:13:20.000Z"
    assert wallet_loader.wallet.initialized

    [entry] = await journal.get_entries(TEST_CID)
    assert entry.operation == "renew"
    assert entry.status == "renewed"
    assert entry.filename == "test.json"


async def test_renewal_sizes_in_decimal_megabytes(renewal, mock_generator):
    await renewal.renew(TEST_CID, "test-wallet", now=AFTER_EXPIRY)
    assert mock_generator.calls == [(TEST_CID, "test.json", 2_500_000 / DECIMAL_MEGABYTE)]
    assert mock_generator.calls[0][2] == 2.5


async def test_renewing_unexpired_claim_warns_and_proceeds(renewal, mock_generator, caplog):
    with caplog.at_level(logging.WARNING, logger="pinclaim.claims.renewal"):
        result = await renewal.renew(TEST_CID, "test-wallet", now=BEFORE_EXPIRY)

    assert not result.expired
    assert len(mock_generator.calls) == 1
    assert "has not expired yet" in caplog.text


async def test_previous_txids_are_left_alone(renewal, mock_service):
    await renewal.renew(TEST_CID, "test-wallet", now=AFTER_EXPIRY)
    assert mock_service.submit_calls == []
    assert mock_service.records[TEST_CID]["claimTxid"] == "claim_txid_1"


async def test_check_expiration(renewal):
    record, expired = await renewal.check_expiration(TEST_CID, now=AFTER_EXPIRY)
    assert expired
    assert record.expiration_time == "2024-11-14T22:13:20.000Z"


@pytest.mark.parametrize(
    "cid, wallet_name, flag", [("", "test-wallet", "-c flag"), (TEST_CID, "", "-n flag")],
)
async def test_missing_arguments(renewal, mock_service, cid, wallet_name, flag):
    with pytest.raises(MissingArgument, match=flag):
        await renewal.renew(cid, wallet_name)
    assert mock_service.status_calls == []


async def test_unconfirmed_claim_cannot_be_renewed(
    test_config, wallet_loader, mock_generator,
):
    service = MockPinService(records={TEST_CID: make_raw_claim(claim_time=None)})
    coordinator = RenewalCoordinator(
        test_config, PinStatusResolver(service), wallet_loader, mock_generator,
    )

    with pytest.raises(MissingExpiration, match="Unable to determine expiration"):
        await coordinator.renew(TEST_CID, "test-wallet")

    assert wallet_loader.load_calls == []
    assert mock_generator.calls == []


async def test_unknown_cid_cannot_be_renewed(test_config, wallet_loader, mock_generator):
    coordinator = RenewalCoordinator(
        test_config, PinStatusResolver(MockPinService()), wallet_loader, mock_generator,
    )
    with pytest.raises(MissingExpiration):
        await coordinator.renew(TEST_CID, "test-wallet")


async def test_insufficient_funds_never_burns(test_config, mock_service, mock_generator, journal):
    coordinator = RenewalCoordinator(
        test_config,
        PinStatusResolver(mock_service),
        MockWalletLoader(MockWallet(token_utxos=make_token_utxos())),
        mock_generator,
        journal=journal,
    )

    with pytest.raises(InsufficientFunds):
        await coordinator.renew(TEST_CID, "test-wallet", now=AFTER_EXPIRY)

    assert mock_generator.calls == []
    assert await journal.get_entries() == []


async def test_renewal_burn_without_claim_is_journaled(test_config, mock_service, journal):
    wallet = MockWallet(
        token_utxos=make_token_utxos(type1=[make_token_utxo()]),
        op_return_error=WalletError("op_return broadcast rejected"),
    )
    coordinator = RenewalCoordinator(
        test_config,
        PinStatusResolver(mock_service),
        MockWalletLoader(wallet),
        BurnClaimGenerator(PSF_TOKEN_ID, test_config.write_price),
        journal=journal,
    )

    with pytest.raises(ClaimGenerationError) as exc_info:
        await coordinator.renew(TEST_CID, "test-wallet", now=AFTER_EXPIRY)

    assert exc_info.value.pob_txid == "mock_pob_txid"
    [orphan] = await journal.get_orphaned()
    assert orphan.operation == "renew"
    assert orphan.status == "burned"
    assert orphan.pob_txid == "mock_pob_txid"
    assert orphan.cid == TEST_CID
