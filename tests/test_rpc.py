from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from solana.rpc.commitment import Finalized
from solana.rpc.types import TokenAccountOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from aardvark_pay.errors import RpcError
from aardvark_pay.rpc import LatestBlockhash, PaymentRpc, TransactionStatus
from aardvark_pay.settings import Settings

SIG = str(Signature.default())


def _status(err=None, confirmation=None):
    return SimpleNamespace(err=err, confirmation_status=confirmation)


def test_latest_blockhash_returns_raw_bytes():
    client = MagicMock()
    client.get_latest_blockhash.return_value = SimpleNamespace(
        value=SimpleNamespace(blockhash=bytes([0xAA]) * 32, last_valid_block_height=321)
    )
    result = PaymentRpc(client).latest_blockhash()
    assert result == LatestBlockhash(blockhash=bytes([0xAA]) * 32, last_valid_block_height=321)
    client.get_latest_blockhash.assert_called_once_with(commitment=Finalized)


def test_latest_blockhash_wraps_transport_errors():
    client = MagicMock()
    client.get_latest_blockhash.side_effect = RuntimeError("connection reset")
    with pytest.raises(RpcError, match="connection reset"):
        PaymentRpc(client).latest_blockhash()


def test_latest_blockhash_requires_value():
    client = MagicMock()
    client.get_latest_blockhash.return_value = SimpleNamespace(value=None)
    with pytest.raises(RpcError):
        PaymentRpc(client).latest_blockhash()


@pytest.mark.parametrize(
    "status, expected",
    [
        (None, TransactionStatus.NOT_FOUND),
        (_status(err={"InstructionError": [0, "Custom"]}), TransactionStatus.FAILED),
        (_status(confirmation=TransactionConfirmationStatus.Finalized), TransactionStatus.FINALIZED),
        (_status(confirmation=TransactionConfirmationStatus.Confirmed), TransactionStatus.CONFIRMED),
        (_status(confirmation=TransactionConfirmationStatus.Processed), TransactionStatus.PROCESSING),
        (_status(), TransactionStatus.PROCESSING),
    ],
)
def test_signature_status_mapping(status, expected):
    client = MagicMock()
    client.get_signature_statuses.return_value = SimpleNamespace(value=[status])
    assert PaymentRpc(client).signature_status(SIG) is expected
    args, kwargs = client.get_signature_statuses.call_args
    assert args[0] == [Signature.default()]
    assert kwargs == {"search_transaction_history": True}


def test_signature_status_empty_list_is_not_found():
    client = MagicMock()
    client.get_signature_statuses.return_value = SimpleNamespace(value=[])
    assert PaymentRpc(client).signature_status(SIG) is TransactionStatus.NOT_FOUND


def test_settled_statuses():
    assert TransactionStatus.CONFIRMED.is_settled
    assert TransactionStatus.FINALIZED.is_settled
    assert not TransactionStatus.PROCESSING.is_settled
    assert not TransactionStatus.FAILED.is_settled


def test_invalid_signature_string():
    client = MagicMock()
    with pytest.raises(RpcError):
        PaymentRpc(client).signature_status("not a signature")
    client.get_signature_statuses.assert_not_called()


def test_from_settings_builds_client():
    rpc = PaymentRpc.from_settings(Settings(_env_file=None, solana_rpc="http://127.0.0.1:8899"))
    assert rpc.client is not None


def test_token_decimals_reads_supply(mint):
    client = MagicMock()
    client.get_token_supply.return_value = SimpleNamespace(value=SimpleNamespace(decimals=6, amount="1000"))
    assert PaymentRpc(client).token_decimals(mint) == 6
    client.get_token_supply.assert_called_once_with(Pubkey.from_bytes(mint))


def test_token_decimals_errors(mint):
    client = MagicMock()
    client.get_token_supply.return_value = SimpleNamespace(value=None)
    with pytest.raises(RpcError):
        PaymentRpc(client).token_decimals(mint)
    client.get_token_supply.side_effect = RuntimeError("timeout")
    with pytest.raises(RpcError, match="timeout"):
        PaymentRpc(client).token_decimals(mint)


@pytest.mark.parametrize("accounts, expected", [([], False), ([SimpleNamespace(pubkey="ata")], True)])
def test_token_account_exists(recipient, mint, accounts, expected):
    client = MagicMock()
    client.get_token_accounts_by_owner.return_value = SimpleNamespace(value=accounts)
    assert PaymentRpc(client).token_account_exists(recipient, mint) is expected
    (owner, opts), _ = client.get_token_accounts_by_owner.call_args
    assert owner == Pubkey.from_bytes(recipient)
    assert opts == TokenAccountOpts(mint=Pubkey.from_bytes(mint))


def test_token_account_exists_wraps_errors(recipient, mint):
    client = MagicMock()
    client.get_token_accounts_by_owner.side_effect = RuntimeError("429")
    with pytest.raises(RpcError, match="429"):
        PaymentRpc(client).token_account_exists(recipient, mint)
