"""
Tests for the SDK data models.
"""
import pytest

from fundchain_sdk.models import (
    ETHER,
    PreparedTransaction,
    Quantity,
    Token,
    UnsignedRawTransaction,
    create_quantity,
)
from tests.test_helpers import TEST_CONTRACT, TEST_MLN, TEST_WALLET

MLN = Token(symbol="MLN", address=TEST_MLN)


def test_quantity_from_strings():
    assert create_quantity(MLN, "0x10").quantity == 16
    assert create_quantity(MLN, "1000").quantity == 1000
    assert create_quantity(MLN, 5).quantity == 5


def test_zero_quantity():
    zero = Quantity.zero(ETHER)
    assert zero.is_zero
    assert zero.token.is_native


def test_same_asset():
    assert MLN.same_asset(Token(symbol="OTHER", address=TEST_MLN.lower()))
    assert not MLN.same_asset(ETHER)
    assert ETHER.same_asset(Token(symbol="ETH"))
    assert not ETHER.same_asset(Token(symbol="MATIC"))


def test_raw_transaction_dict_omits_unset_fields():
    raw = UnsignedRawTransaction(**{
        "from": TEST_WALLET, "to": TEST_CONTRACT, "data": "0x", "gas": 21000, "gasPrice": 1
    })
    assert raw.to_tx_dict() == {
        "from": TEST_WALLET, "to": TEST_CONTRACT, "data": "0x", "gas": 21000, "gasPrice": 1, "value": 0
    }


def _prepared():
    return PreparedTransaction(
        method="approve",
        params={"amount": 1},
        fee=Quantity.zero(ETHER),
        gas_estimate=21000,
        transaction_args=["1"],
        raw_transaction=UnsignedRawTransaction(
            from_address=TEST_WALLET, to=TEST_CONTRACT, data="0x", gas=21000, gas_price=1
        ),
    )


def test_with_signature_returns_copy():
    prepared = _prepared()

    signed = prepared.with_signature(b"\xde\xad")

    assert signed.signed_transaction == "0xdead"
    assert prepared.signed_transaction is None
    assert not signed.submitted


def test_signed_copy_shares_submission_state():
    prepared = _prepared()
    signed = prepared.with_signature(b"\xde\xad")

    signed.mark_submitted()

    assert prepared.submitted
    with pytest.raises(ValueError, match="already submitted"):
        prepared.with_signature("0xbeef")


def test_with_signature_after_submission():
    prepared = _prepared()
    prepared.mark_submitted()

    with pytest.raises(ValueError, match="already submitted"):
        prepared.with_signature("0xdead")
