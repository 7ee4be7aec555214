"""
Void Service - reversal engine for cash sales, invoices and invoice payments.

Each public operation runs inside one unit of work: either the whole
cascade (void blocks, reversal lines, VoidedSale snapshot, invoice and
debtor ledger rows) commits, or none of it does.

The payment reversal has two entry points. ``VoidService.void_payment``
opens its own unit of work; ``_void_payment`` only runs inside a
transaction its caller already holds, which is how the invoice void
cascades into it.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from database import unit_of_work
from logging_config import get_logger
from models import (
     BillingTransType,
     Debtor,
     DebtorLog,
     Invoice,
     InvoiceItem,
     InvoiceLog,
     InvoicePayment,
     InvoicePaymentDetail,
     InvoiceStatus,
     Receipt,
     ReceiptItem,
     Sale,
     SaleItem,
     VoidedSale,
     VoidedSaleItem,
     VoidSource,
)
from schemas.void import VoidSaleRequest
from services.context import VoidContext
from services.exceptions import AlreadyVoidedError, RecordNotFoundError, TransactionRequiredError
from services.reference_service import VOID_PREFIX, generate_unique_number

log = get_logger(__name__)


def _new_void_no(db: Session, ctx: VoidContext) -> str:
     return generate_unique_number(db, VoidedSale.void_no, VOID_PREFIX, now=ctx.now)


def _reverse_lines(original_items, reversal_targets, voided_sale: VoidedSale) -> int:
     """
     Attach reversal and snapshot lines for every original line with quantity > 0.

     Each target collection (a relationship list such as ``receipt.items``)
     gets a negated-quantity line paired with its own item class; the
     VoidedSale gets the positive snapshot.

     Returns:
          Number of original lines reversed
     """
     originals = [item for item in original_items if item.quantity > 0]
     for item in originals:
          for target_items, item_cls in reversal_targets:
               target_items.append(item_cls(item_id=item.item_id, quantity=-item.quantity, price=item.price))
          voided_sale.items.append(
               VoidedSaleItem(item_id=item.item_id, quantity=item.quantity, price=item.price)
          )
     return len(originals)


def _locked(tx: Session, query):
     """
     Row-lock the rows of ``query`` and re-read them from the database.

     Pending writes are flushed first: ``populate_existing`` overwrites the
     in-memory state of any object already in the session, so the locked
     values replace whatever was read before the lock was taken.
     """
     tx.flush()
     return query.with_for_update().populate_existing().first()


def _lock_debtor(tx: Session, customer_id: int) -> Optional[Debtor]:
     return _locked(tx, tx.query(Debtor).filter(Debtor.customer_id == customer_id))


def _lock_invoice(tx: Session, invoice_no: str) -> Optional[Invoice]:
     return _locked(tx, tx.query(Invoice).filter(Invoice.invoice_no == invoice_no))


def _lock_payment(tx: Session, receipt_no: str) -> Optional[InvoicePayment]:
     return _locked(tx, tx.query(InvoicePayment).filter(InvoicePayment.receipt_no == receipt_no))


def _void_payment(
     tx: Session,
     payment: InvoicePayment,
     trans_date: datetime,
     reasons: str,
     ctx: VoidContext
) -> VoidedSale:
     """
     Reverse one payment's effect on its invoices and the debtor ledger.

     Opens no unit of work of its own; ``tx`` must already be inside a
     transaction, and the caller decides when it commits.

     Raises:
          TransactionRequiredError: If ``tx`` has no open transaction
     """
     if not tx.in_transaction():
          raise TransactionRequiredError("payment void")

     void_no = _new_void_no(tx, ctx)
     trans_type = BillingTransType.PAYMENT_CANCELLATION

     # Step 1: void the payment itself
     payment.mark_voided(void_no, trans_date, trans_type, ctx)

     # Step 2: historical record of the voided payment
     voided_sale = VoidedSale(
          trans_date=trans_date,
          customer_id=payment.customer_id,
          receipt_no=payment.receipt_no,
          total_paid=payment.total_paid,
          void_source=VoidSource.INVOICE_PAYMENT,
          currency_id=payment.currency_id,
          user_id=payment.user_id,
          reasons=reasons,
          created_at=ctx.now,
     )
     voided_sale.mark_voided(void_no, trans_date, trans_type, ctx)
     tx.add(voided_sale)
     tx.flush()  # Reserve void_no before any further reference is generated

     # Step 3: give each allocation back to its invoice
     details = (
          tx.query(InvoicePaymentDetail)
          .filter(InvoicePaymentDetail.receipt_no == payment.receipt_no)
          .order_by(InvoicePaymentDetail.id)
          .all()
     )
     for detail in details:
          invoice = _lock_invoice(tx, detail.invoice_no)
          if invoice is None:
               log.warning("payment_detail_invoice_missing", receipt_no=payment.receipt_no, invoice_no=detail.invoice_no)
               continue
          invoice.reverse_allocation(detail.allocated_amount)
          tx.add(InvoiceLog(
               trans_date=trans_date,
               customer_id=invoice.customer_id,
               reference=void_no,
               invoice_no=invoice.invoice_no,
               debit_amount=detail.allocated_amount,
               credit_amount=Decimal("0"),
               year_part=trans_date.year,
               month_part=trans_date.month,
               trans_type=int(trans_type),
               description=f"Reversal for Payment #{payment.receipt_no}",
               user_id=ctx.actor_id,
          ))

     # Step 4: the customer owes the payment again
     debtor = _lock_debtor(tx, payment.customer_id)
     if debtor is not None:
          debtor.balance = debtor.balance + payment.total_paid
          tx.add(DebtorLog(
               trans_date=trans_date,
               debtor_id=debtor.id,
               reference=void_no,
               debtor_type=debtor.debtor_type,
               debit_amount=payment.total_paid,
               credit_amount=Decimal("0"),
               year_part=trans_date.year,
               month_part=trans_date.month,
               trans_type=int(trans_type),
               description=f"Payment Reversal #{payment.receipt_no}",
               user_id=ctx.actor_id,
          ))
     else:
          log.warning("debtor_missing", customer_id=payment.customer_id, receipt_no=payment.receipt_no)

     tx.flush()
     log.info(
          "payment_voided",
          receipt_no=payment.receipt_no,
          void_no=void_no,
          amount=str(payment.total_paid),
          invoices=len(details),
     )
     return voided_sale


class VoidService:
     """Service class for reversing completed billing transactions."""

     @staticmethod
     def void_receipt(
          db: Session,
          receipt_no: str,
          trans_date: datetime,
          reasons: str,
          ctx: VoidContext
     ) -> VoidedSale:
          """
          Void a cash sale (receipt) and the Sale that mirrors it.

          Re-voiding a receipt that is already voided is not rejected: it
          writes a second snapshot and a second set of reversal lines.

          Args:
               db: SQLAlchemy database session
               receipt_no: Receipt number of the cash sale
               trans_date: Effective date of the void
               reasons: Free-text reason stored on the snapshot
               ctx: Acting user and clock

          Returns:
               The VoidedSale snapshot

          Raises:
               RecordNotFoundError: If no receipt has that number
          """
          receipt = db.query(Receipt).filter(Receipt.receipt_no == receipt_no).first()
          if receipt is None:
               raise RecordNotFoundError("Receipt", receipt_no)

          trans_type = BillingTransType.SALE_CANCELLATION
          with unit_of_work(db):
               void_no = _new_void_no(db, ctx)

               receipt.mark_voided(void_no, trans_date, trans_type, ctx)

               sale = db.query(Sale).filter(Sale.receipt_no == receipt.receipt_no).first()
               if sale is not None:
                    sale.mark_voided(void_no, trans_date, trans_type, ctx)

               voided_sale = VoidedSale(
                    trans_date=trans_date,
                    customer_id=receipt.customer_id,
                    receipt_no=receipt.receipt_no,
                    total_due=receipt.total_due,
                    total_paid=receipt.total_paid,
                    balance_due=receipt.total_due - receipt.total_paid,
                    void_source=VoidSource.CASH_SALE,
                    currency_id=receipt.currency_id,
                    user_id=receipt.user_id,
                    reasons=reasons,
                    created_at=ctx.now,
               )
               voided_sale.mark_voided(void_no, trans_date, trans_type, ctx)
               db.add(voided_sale)

               targets = [(receipt.items, ReceiptItem)]
               if sale is not None:
                    targets.append((sale.items, SaleItem))
               reversed_count = _reverse_lines(list(receipt.items), targets, voided_sale)
               db.flush()

          log.info(
               "receipt_voided",
               receipt_no=receipt_no,
               void_no=void_no,
               sale_id=sale.id if sale is not None else None,
               lines=reversed_count,
          )
          return voided_sale

     @staticmethod
     def void_payment(
          db: Session,
          payment: InvoicePayment,
          trans_date: datetime,
          reasons: str,
          ctx: VoidContext
     ) -> VoidedSale:
          """
          Void a standalone invoice payment in its own unit of work.

          The payment row is locked and re-read before the voided flag is
          checked, so two concurrent voids of one payment cannot both pass.

          Raises:
               RecordNotFoundError: If the payment row no longer exists
               AlreadyVoidedError: If the payment is already voided
          """
          receipt_no = payment.receipt_no
          with unit_of_work(db):
               payment = _lock_payment(db, receipt_no)
               if payment is None:
                    raise RecordNotFoundError("InvoicePayment", receipt_no)
               if payment.voided:
                    raise AlreadyVoidedError("InvoicePayment", receipt_no)
               voided_sale = _void_payment(db, payment, trans_date, reasons, ctx)
          return voided_sale

     @staticmethod
     def void_invoice(
          db: Session,
          sale: Sale,
          trans_date: datetime,
          reasons: str,
          ctx: VoidContext
     ) -> VoidedSale:
          """
          Void a credit sale: its payments first, then the invoice and sale.

          Payments are reversed before the invoice-level debtor credit. Each
          payment reversal restores the paid portion of the debt; the final
          credit of the invoice total then leaves the debtor exactly where it
          stood before the invoice existed.

          Args:
               db: SQLAlchemy database session
               sale: Loaded Sale carrying the invoice number
               trans_date: Effective date of the void
               reasons: Free-text reason stored on the snapshot
               ctx: Acting user and clock

          Returns:
               The invoice-level VoidedSale snapshot

          Raises:
               RecordNotFoundError: If the invoice does not exist
          """
          invoice = db.query(Invoice).filter(Invoice.invoice_no == sale.invoice_no).first()
          if invoice is None:
               raise RecordNotFoundError("Invoice", sale.invoice_no)

          trans_type = BillingTransType.SALE_CANCELLATION
          with unit_of_work(db):
               invoice = _lock_invoice(db, invoice.invoice_no)

               # Step 1: reverse every live payment allocated to this invoice
               details = (
                    db.query(InvoicePaymentDetail)
                    .filter(InvoicePaymentDetail.invoice_no == invoice.invoice_no)
                    .order_by(InvoicePaymentDetail.id)
                    .all()
               )
               payments_voided = 0
               for detail in details:
                    payment = _lock_payment(db, detail.receipt_no)
                    if payment is None or payment.voided:
                         continue
                    _void_payment(
                         db,
                         payment,
                         trans_date,
                         f"Voided due to cancellation of Invoice #{invoice.invoice_no}",
                         ctx,
                    )
                    payments_voided += 1

               # Step 2: the invoice itself
               void_no = _new_void_no(db, ctx)
               invoice.cancel()
               invoice.mark_voided(void_no, trans_date, trans_type, ctx)

               # Step 3: the sale that carried it
               sale.mark_voided(void_no, trans_date, trans_type, ctx)

               # Step 4: snapshot; total_paid comes from the sale, as it stood
               # before the payment reversals above
               voided_sale = VoidedSale(
                    trans_date=trans_date,
                    customer_id=invoice.customer_id,
                    invoice_no=invoice.invoice_no,
                    total_due=invoice.total_due,
                    total_paid=sale.total_paid,
                    balance_due=invoice.balance_due,
                    paid_for_invoice=invoice.paid_for_invoice,
                    status=InvoiceStatus.CANCELLED,
                    void_source=VoidSource.INVOICE_SALE,
                    currency_id=invoice.currency_id,
                    user_id=invoice.user_id,
                    reasons=reasons,
                    created_at=ctx.now,
               )
               voided_sale.mark_voided(void_no, trans_date, trans_type, ctx)
               db.add(voided_sale)

               # Step 5: stock reversal lines
               reversed_count = _reverse_lines(
                    list(invoice.items),
                    [(invoice.items, InvoiceItem), (sale.items, SaleItem)],
                    voided_sale,
               )

               # Step 6: undo the debt the invoice created
               debtor = _lock_debtor(db, invoice.customer_id)
               if debtor is not None:
                    debtor.balance = debtor.balance - invoice.total_due
                    db.add(DebtorLog(
                         trans_date=trans_date,
                         debtor_id=debtor.id,
                         reference=void_no,
                         debtor_type=debtor.debtor_type,
                         debit_amount=Decimal("0"),
                         credit_amount=invoice.total_due,
                         year_part=trans_date.year,
                         month_part=trans_date.month,
                         trans_type=int(trans_type),
                         description=f"Cancellation of Invoice #{invoice.invoice_no}",
                         user_id=ctx.actor_id,
                    ))
               else:
                    log.warning("debtor_missing", customer_id=invoice.customer_id, invoice_no=invoice.invoice_no)
               db.flush()

          log.info(
               "invoice_voided",
               invoice_no=invoice.invoice_no,
               void_no=void_no,
               payments_voided=payments_voided,
               lines=reversed_count,
          )
          return voided_sale

     @staticmethod
     def void_sale(
          db: Session,
          sale: Sale,
          request: VoidSaleRequest,
          ctx: VoidContext
     ) -> VoidedSale:
          """
          Void a loaded sale the way its billing kind requires.

          Credit sales go through the invoice void, cash sales through the
          receipt void.
          """
          trans_date = request.trans_date or ctx.now
          if sale.invoice_no:
               return VoidService.void_invoice(db, sale, trans_date, request.remarks, ctx)
          return VoidService.void_receipt(db, sale.receipt_no, trans_date, request.remarks, ctx)
