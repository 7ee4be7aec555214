"""Shared pytest fixtures: in-memory database and forward-flow seed helpers."""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from models import (
    Base,
    Debtor,
    Invoice,
    InvoiceItem,
    InvoicePayment,
    InvoicePaymentDetail,
    InvoiceStatus,
    Receipt,
    ReceiptItem,
    Sale,
    SaleItem,
)
from services.context import VoidContext

NOW = datetime(2026, 3, 14, 10, 30, 0)
TRANS_DATE = datetime(2026, 3, 13, 0, 0, 0)
ACTOR_ID = 7
CUSTOMER_ID = 1


def _lines(items, item_cls):
    return [item_cls(item_id=item_id, quantity=Decimal(qty), price=Decimal(price)) for item_id, qty, price in items]


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with every table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def ctx() -> VoidContext:
    return VoidContext(actor_id=ACTOR_ID, now=NOW)


@pytest.fixture
def make_debtor(db: Session) -> Callable[..., Debtor]:
    """Create a customer's debtor row with an opening balance."""

    def _make(customer_id: int = CUSTOMER_ID, balance: str = "0.00") -> Debtor:
        debtor = Debtor(customer_id=customer_id, debtor_type="Individual", balance=Decimal(balance))
        db.add(debtor)
        db.commit()
        return debtor

    return _make


@pytest.fixture
def make_cash_sale(db: Session) -> Callable[..., Receipt]:
    """Record a completed cash sale: a Receipt and, by default, its mirroring Sale."""

    def _make(
        receipt_no: str = "REC20260313090000001",
        items=((101, "3", "10.00"), (102, "2", "5.00")),
        total_due: str = "40.00",
        total_paid: str = "40.00",
        customer_id: int = CUSTOMER_ID,
        with_sale: bool = True,
    ) -> Receipt:
        receipt = Receipt(
            receipt_no=receipt_no,
            trans_date=TRANS_DATE,
            customer_id=customer_id,
            total_due=Decimal(total_due),
            total_paid=Decimal(total_paid),
            items=_lines(items, ReceiptItem),
            user_id=ACTOR_ID,
        )
        db.add(receipt)
        if with_sale:
            db.add(Sale(
                receipt_no=receipt_no,
                trans_date=TRANS_DATE,
                customer_id=customer_id,
                total_due=Decimal(total_due),
                total_paid=Decimal(total_paid),
                items=_lines(items, SaleItem),
                user_id=ACTOR_ID,
            ))
        db.commit()
        return receipt

    return _make


@pytest.fixture
def make_credit_sale(db: Session) -> Callable[..., Sale]:
    """Record a credit sale: Sale + Invoice, and raise the customer's debt by the total."""

    def _make(
        invoice_no: str = "INV20260313090000001",
        items=((201, "4", "25.00"),),
        total_due: str = "100.00",
        sale_total_paid: str = "0.00",
        customer_id: int = CUSTOMER_ID,
    ) -> Sale:
        amount = Decimal(total_due)
        invoice = Invoice(
            invoice_no=invoice_no,
            trans_date=TRANS_DATE,
            customer_id=customer_id,
            total_due=amount,
            total_paid=Decimal("0.00"),
            balance_due=amount,
            status=InvoiceStatus.OPEN,
            items=_lines(items, InvoiceItem),
            user_id=ACTOR_ID,
        )
        sale = Sale(
            invoice_no=invoice_no,
            trans_date=TRANS_DATE,
            customer_id=customer_id,
            total_due=amount,
            total_paid=Decimal(sale_total_paid),
            items=_lines(items, SaleItem),
            user_id=ACTOR_ID,
        )
        db.add_all([invoice, sale])
        debtor = db.query(Debtor).filter(Debtor.customer_id == customer_id).first()
        if debtor is not None:
            debtor.balance = debtor.balance + amount
        db.commit()
        return sale

    return _make


@pytest.fixture
def make_payment(db: Session) -> Callable[..., InvoicePayment]:
    """Record a payment allocated over one or more invoices, closing any it settles."""

    def _make(
        receipt_no: str,
        allocations: dict,
        customer_id: int = CUSTOMER_ID,
        voided: bool = False,
    ) -> InvoicePayment:
        total = sum((Decimal(v) for v in allocations.values()), Decimal("0.00"))
        payment = InvoicePayment(
            receipt_no=receipt_no,
            trans_date=TRANS_DATE,
            customer_id=customer_id,
            total_due=total,
            total_paid=total,
            voided=voided,
            user_id=ACTOR_ID,
        )
        db.add(payment)
        for invoice_no, value in allocations.items():
            amount = Decimal(value)
            invoice = db.query(Invoice).filter(Invoice.invoice_no == invoice_no).one()
            db.add(InvoicePaymentDetail(
                receipt_no=receipt_no,
                invoice_no=invoice_no,
                total_due=invoice.total_due,
                allocated_amount=amount,
            ))
            invoice.total_paid = invoice.total_paid + amount
            invoice.balance_due = invoice.balance_due - amount
            if invoice.balance_due == 0:
                invoice.status = InvoiceStatus.CLOSED
        debtor = db.query(Debtor).filter(Debtor.customer_id == customer_id).first()
        if debtor is not None:
            debtor.balance = debtor.balance - total
        db.commit()
        return payment

    return _make


def reversal_lines(items) -> list:
    return [(item.item_id, item.quantity) for item in items if item.quantity < 0]


def positive_lines(items) -> list:
    return [(item.item_id, item.quantity) for item in items if item.quantity > 0]


def invoice_balanced(invoice: Invoice) -> bool:
    return invoice.balance_due == invoice.total_due - invoice.total_paid


def find_invoice(db: Session, invoice_no: str) -> Optional[Invoice]:
    return db.query(Invoice).filter(Invoice.invoice_no == invoice_no).first()
