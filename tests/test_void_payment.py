"""Tests for voiding invoice payments."""

from decimal import Decimal

import pytest

from models import (
    BillingTransType,
    Debtor,
    DebtorLog,
    Invoice,
    InvoiceLog,
    InvoicePayment,
    InvoiceStatus,
    VoidedSale,
    VoidSource,
)
from services.exceptions import AlreadyVoidedError, TransactionRequiredError
from services.void_service import VoidService, _void_payment

from conftest import ACTOR_ID, NOW, TRANS_DATE, find_invoice, invoice_balanced

INVOICE_NO = "INV20260313090000001"


def test_voiding_a_closing_payment_reopens_the_invoice(db, ctx, make_debtor, make_credit_sale, make_payment):
    make_debtor(balance="50.00")
    make_credit_sale(total_due="100.00")
    payment = make_payment("RCP-1", {INVOICE_NO: "100.00"})
    invoice = find_invoice(db, INVOICE_NO)
    assert invoice.status == InvoiceStatus.CLOSED

    VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert invoice.status == InvoiceStatus.OPEN
    assert invoice.balance_due == Decimal("100.00")
    assert invoice.total_paid == Decimal("0.00")
    assert invoice_balanced(invoice)


def test_void_payment_marks_payment_and_snapshot(db, ctx, make_debtor, make_credit_sale, make_payment):
    make_debtor()
    make_credit_sale()
    payment = make_payment("RCP-1", {INVOICE_NO: "60.00"})

    voided_sale = VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert payment.voided is True
    assert payment.void_no == voided_sale.void_no
    assert payment.void_sys_date == NOW
    assert payment.void_user_id == ACTOR_ID
    assert payment.trans_type == BillingTransType.PAYMENT_CANCELLATION
    assert voided_sale.void_source == VoidSource.INVOICE_PAYMENT
    assert voided_sale.receipt_no == "RCP-1"
    assert voided_sale.total_paid == Decimal("60.00")
    assert voided_sale.reasons == "Cheque bounced"
    assert voided_sale.items == []


def test_partial_payment_void_keeps_open_status(db, ctx, make_debtor, make_credit_sale, make_payment):
    make_debtor()
    make_credit_sale(total_due="100.00")
    payment = make_payment("RCP-1", {INVOICE_NO: "30.00"})
    invoice = find_invoice(db, INVOICE_NO)

    VoidService.void_payment(db, payment, TRANS_DATE, "Entered twice", ctx)

    assert invoice.status == InvoiceStatus.OPEN
    assert invoice.balance_due == Decimal("100.00")
    assert invoice_balanced(invoice)


def test_void_payment_writes_invoice_and_debtor_ledgers(db, ctx, make_debtor, make_credit_sale, make_payment):
    debtor = make_debtor(balance="0.00")
    make_credit_sale(total_due="100.00")
    payment = make_payment("RCP-1", {INVOICE_NO: "100.00"})
    assert debtor.balance == Decimal("0.00")

    voided_sale = VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert debtor.balance == Decimal("100.00")

    invoice_log = db.query(InvoiceLog).one()
    assert invoice_log.reference == voided_sale.void_no
    assert invoice_log.invoice_no == INVOICE_NO
    assert invoice_log.debit_amount == Decimal("100.00")
    assert invoice_log.credit_amount == Decimal("0")
    assert invoice_log.user_id == ACTOR_ID
    assert invoice_log.description == "Reversal for Payment #RCP-1"

    debtor_log = db.query(DebtorLog).one()
    assert debtor_log.debtor_id == debtor.id
    assert debtor_log.reference == voided_sale.void_no
    assert debtor_log.debit_amount == Decimal("100.00")
    assert debtor_log.trans_type == BillingTransType.PAYMENT_CANCELLATION


def test_payment_spread_over_two_invoices(db, ctx, make_debtor, make_credit_sale, make_payment):
    make_debtor()
    make_credit_sale(invoice_no="INV-A", total_due="50.00")
    make_credit_sale(invoice_no="INV-B", total_due="80.00")
    payment = make_payment("RCP-1", {"INV-A": "50.00", "INV-B": "30.00"})

    VoidService.void_payment(db, payment, TRANS_DATE, "Allocated to wrong account", ctx)

    first, second = find_invoice(db, "INV-A"), find_invoice(db, "INV-B")
    assert first.status == InvoiceStatus.OPEN
    assert first.balance_due == Decimal("50.00")
    assert second.balance_due == Decimal("80.00")
    assert invoice_balanced(first) and invoice_balanced(second)
    assert db.query(InvoiceLog).count() == 2


def test_payment_void_without_debtor_still_reverses_invoices(db, ctx, make_credit_sale, make_payment):
    make_credit_sale()
    payment = make_payment("RCP-1", {INVOICE_NO: "100.00"})

    VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert find_invoice(db, INVOICE_NO).status == InvoiceStatus.OPEN
    assert db.query(DebtorLog).count() == 0


def test_already_voided_payment_is_rejected(db, ctx, make_debtor, make_credit_sale, make_payment):
    make_debtor()
    make_credit_sale()
    payment = make_payment("RCP-1", {INVOICE_NO: "40.00"})
    VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    with pytest.raises(AlreadyVoidedError):
        VoidService.void_payment(db, payment, TRANS_DATE, "Second attempt", ctx)

    assert db.query(VoidedSale).count() == 1


def test_inner_payment_void_requires_open_transaction(session_factory, db, ctx, make_credit_sale, make_payment):
    make_credit_sale()
    payment = make_payment("RCP-1", {INVOICE_NO: "40.00"})
    fresh = session_factory()

    try:
        with pytest.raises(TransactionRequiredError):
            _void_payment(fresh, payment, TRANS_DATE, "No transaction", ctx)
    finally:
        fresh.close()

    assert db.query(InvoicePayment).filter(InvoicePayment.voided.is_(True)).count() == 0


def test_void_payment_builds_on_balances_committed_by_another_session(
    db, session_factory, ctx, make_debtor, make_credit_sale, make_payment
):
    debtor = make_debtor(balance="0.00")
    make_credit_sale(total_due="100.00")
    payment = make_payment("RCP-1", {INVOICE_NO: "40.00"})
    invoice = find_invoice(db, INVOICE_NO)
    assert (debtor.balance, invoice.total_paid) == (Decimal("60.00"), Decimal("40.00"))

    other = session_factory()
    try:
        other_debtor = other.query(Debtor).filter(Debtor.id == debtor.id).one()
        other_debtor.balance = other_debtor.balance + Decimal("25.00")
        other_invoice = other.query(Invoice).filter(Invoice.invoice_no == INVOICE_NO).one()
        other_invoice.total_paid = other_invoice.total_paid + Decimal("10.00")
        other_invoice.balance_due = other_invoice.balance_due - Decimal("10.00")
        other.commit()
    finally:
        other.close()

    VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert debtor.balance == Decimal("125.00")
    assert invoice.total_paid == Decimal("10.00")
    assert invoice.balance_due == Decimal("90.00")
    assert invoice_balanced(invoice)


def test_payment_voided_by_another_session_is_rejected(
    db, session_factory, ctx, make_debtor, make_credit_sale, make_payment
):
    debtor = make_debtor()
    make_credit_sale()
    payment = make_payment("RCP-1", {INVOICE_NO: "40.00"})
    other = session_factory()
    try:
        other_payment = other.query(InvoicePayment).filter(InvoicePayment.receipt_no == "RCP-1").one()
        VoidService.void_payment(other, other_payment, TRANS_DATE, "First void", ctx)
    finally:
        other.close()
    assert payment.voided is False

    with pytest.raises(AlreadyVoidedError):
        VoidService.void_payment(db, payment, TRANS_DATE, "Second void", ctx)

    assert db.query(VoidedSale).count() == 1
    assert debtor.balance == Decimal("100.00")


def test_payment_on_a_cancelled_invoice_keeps_it_cancelled(db, ctx, make_debtor, make_credit_sale, make_payment):
    debtor = make_debtor()
    make_credit_sale(total_due="100.00")
    payment = make_payment("RCP-1", {INVOICE_NO: "60.00"})
    invoice = find_invoice(db, INVOICE_NO)
    invoice.status = InvoiceStatus.CANCELLED
    db.commit()

    VoidService.void_payment(db, payment, TRANS_DATE, "Cheque bounced", ctx)

    assert invoice.status == InvoiceStatus.CANCELLED
    assert invoice.total_paid == Decimal("0.00")
    assert invoice.balance_due == Decimal("100.00")
    assert debtor.balance == Decimal("100.00")
