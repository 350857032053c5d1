from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from common.interchange.exceptions import BalanceMismatchError, MissingBalanceError
from common.interchange.mt940 import (
    CreditDebit,
    Mt940Document,
    Mt940DocumentBuilder,
    balances_match,
    closing_from_opening,
    net_movement,
    opening_from_closing,
    reconcile,
)


def test_closing_derived_from_opening(make_balance, make_transaction):
    txns = [make_transaction("250.00", "C"), make_transaction("80.25", "D")]
    result = reconcile(txns, opening=make_balance("100.00", "C"))
    assert result.closing.direction == CreditDebit.CREDIT
    assert result.closing.amount == Decimal("269.75")
    assert result.closing.currency == "EUR"


def test_opening_derived_from_closing(make_balance, make_transaction):
    txns = [make_transaction("50.00", "C")]
    result = reconcile(txns, closing=make_balance("20.00", "D"))
    assert result.opening.direction == CreditDebit.DEBIT
    assert result.opening.amount == Decimal("70.00")


def test_derived_balance_flips_to_debit(make_balance, make_transaction):
    closing = closing_from_opening(make_balance("10.00", "C"), [make_transaction("25.50", "D")])
    assert closing.direction == CreditDebit.DEBIT
    assert closing.amount == Decimal("15.50")
    assert closing.signed_amount == Decimal("-15.50")


def test_zero_result_is_credit(make_balance, make_transaction):
    closing = closing_from_opening(make_balance("10.00", "D"), [make_transaction("10.00", "C")])
    assert closing.direction == CreditDebit.CREDIT
    assert closing.amount == Decimal("0.00")


def test_zero_debit_without_transactions_keeps_direction(make_balance):
    opening = make_balance("0.00", "D")
    assert closing_from_opening(opening, []) == opening
    assert opening_from_closing(opening, []) == opening

    result = reconcile([], opening=opening)
    assert result.closing.direction == CreditDebit.DEBIT
    assert result.closing.amount == Decimal("0.00")


def test_forward_then_reverse_reproduces_opening(make_balance, make_transaction):
    opening = make_balance("1234.56", "D")
    txns = [
        make_transaction("0.01", "C"),
        make_transaction("999.99", "D"),
        make_transaction("2000.00", "C"),
    ]
    closing = closing_from_opening(opening, txns)
    back = opening_from_closing(closing, txns)
    assert back.signed_amount == opening.signed_amount
    assert back.direction == opening.direction


def test_no_transactions_keeps_balance(make_balance):
    result = reconcile([], opening=make_balance("42.00", "C"))
    assert result.closing.signed_amount == Decimal("42.00")


def test_both_balances_consistent(make_balance, make_transaction):
    result = reconcile(
        [make_transaction("40.00", "D")],
        opening=make_balance("100.00", "C"),
        closing=make_balance("60.00", "C"),
    )
    assert result.closing.amount == Decimal("60.00")


def test_mismatch_carries_expected_and_actual(make_balance, make_transaction):
    with pytest.raises(BalanceMismatchError) as excinfo:
        reconcile(
            [make_transaction("40.00", "D")],
            opening=make_balance("100.00", "C"),
            closing=make_balance("70.00", "C"),
        )
    err = excinfo.value
    assert err.error_code == "IX-401"
    assert err.expected.signed_amount == Decimal("60.00")
    assert err.actual.signed_amount == Decimal("70.00")


def test_currency_mismatch_is_a_balance_mismatch(make_balance):
    with pytest.raises(BalanceMismatchError):
        reconcile([], opening=make_balance("1.00"), closing=make_balance("1.00", currency="USD"))


def test_zero_debit_matches_zero_credit(make_balance):
    result = reconcile([], opening=make_balance("0.00", "D"), closing=make_balance("0.00", "C"))
    assert result.closing.amount == Decimal("0.00")


def test_missing_balances_raise(make_transaction):
    with pytest.raises(MissingBalanceError) as excinfo:
        reconcile([make_transaction("1.00")])
    assert excinfo.value.error_code == "IX-400"


def test_net_movement_is_signed_sum(make_transaction):
    txns = [make_transaction("10.10", "C"), make_transaction("0.20", "D"), make_transaction("0.10", "RC")]
    assert net_movement(txns) == Decimal("10.00")


def test_amounts_are_quantized(make_balance, make_transaction):
    assert make_balance("1.005").amount == Decimal("1.01")
    assert make_transaction(Decimal("2")).amount == Decimal("2.00")


def test_negative_amount_rejected(make_transaction):
    with pytest.raises(ValidationError):
        make_transaction("-1.00")


def test_bad_direction_rejected(make_balance):
    with pytest.raises(ValidationError):
        make_balance("1.00", "X")


def test_direction_accepts_long_names(make_balance):
    assert make_balance("1.00", "debit").direction == CreditDebit.DEBIT


def test_document_rejects_unreconciled_balances(make_balance):
    with pytest.raises(BalanceMismatchError):
        Mt940Document(
            account_id="DE02120300000000202051",
            opening_balance=make_balance("10.00"),
            closing_balance=make_balance("11.00"),
        )


def test_builder_derives_closing(make_balance, make_transaction):
    doc = (
        Mt940DocumentBuilder("DE02120300000000202051")
        .set_opening_balance(make_balance("100.00"))
        .add_transactions([make_transaction("40.00", "D")])
        .build()
    )
    assert doc.closing_balance.signed_amount == Decimal("60.00")
    assert doc.reference_id == "COMMON"
    assert doc.statement_number == "00000"
    assert doc.currency == "EUR"


def test_builder_rejects_non_transactions():
    with pytest.raises(TypeError):
        Mt940DocumentBuilder("X").add_transaction({"amount": "1.00"})


def test_builder_without_balances_raises(make_transaction):
    with pytest.raises(MissingBalanceError):
        Mt940DocumentBuilder("X").add_transaction(make_transaction("1.00")).build()


def test_balance_text_form(make_balance):
    assert make_balance("1234.5", "D").to_mt940() == "D250331EUR1234,50"
    assert str(make_balance("0")) == "C250331EUR0,00"


def test_statement_rendering(make_balance, make_transaction):
    purpose = "Miete Maerz 2025 Wohnung 3 OG links"
    doc = (
        Mt940DocumentBuilder("DE02120300000000202051", reference_id="STMT1", statement_number="00003")
        .set_opening_balance(make_balance("1000.00", on=date(2025, 3, 1)))
        .add_transaction(
            make_transaction(
                "950.00",
                "D",
                date=date(2025, 3, 3),
                valuta_date=date(2025, 3, 4),
                reference="NMSCMIETE",
                purpose=purpose,
            )
        )
        .add_transaction(make_transaction("12.5", "C", date=date(2025, 3, 5)))
        .build()
    )
    assert doc.to_mt940() == "\r\n".join(
        [
            ":20:STMT1",
            ":25:DE02120300000000202051",
            ":28C:00003",
            ":60F:C250301EUR1000,00",
            ":61:2503030304D950,00NMSCMIETE",
            ":86:" + purpose[:27],
            "?20" + purpose[27:],
            ":61:250305C12,50NONREF",
            ":86:",
            ":62F:C250301EUR62,50",
            "-",
        ]
    ) + "\r\n"


def test_purpose_segments_are_27_chars(make_transaction):
    txn = make_transaction("1.00", purpose="x" * 60)
    assert [len(s) for s in txn.purpose_segments()] == [27, 27, 6]
    lines = txn.to_mt940_lines()
    assert lines[2].startswith("?20") and lines[3].startswith("?21")


def test_balances_match_ignores_dates(make_balance):
    assert balances_match(make_balance("5.00", on=date(2025, 1, 1)), make_balance("5.00"))
    assert not balances_match(make_balance("5.00", "C"), make_balance("5.00", "D"))


def test_builder_verifies_given_closing(make_balance, make_transaction):
    builder = (
        Mt940DocumentBuilder("X")
        .set_opening_balance(make_balance("100.00"))
        .set_closing_balance(make_balance("70.00"))
        .add_transaction(make_transaction("40.00", "D"))
    )
    with pytest.raises(BalanceMismatchError):
        builder.build()
    builder.set_closing_balance(None)
    assert builder.build().closing_balance.amount == Decimal("60.00")
