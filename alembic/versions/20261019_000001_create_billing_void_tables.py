"""Create billing and void tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

Sales, receipts, invoices, payments, debtor and invoice ledgers, the
append-only voided_sales audit trail, refunds and collections.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=15, scale=2), nullable=False, server_default='0')


def _period_columns() -> list:
    return [
        sa.Column('year_part', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('month_part', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('trans_type', sa.Integer(), nullable=False, server_default='0'),
    ]


def _void_columns() -> list:
    return [
        sa.Column('voided', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('void_no', sa.String(50), nullable=True),
        sa.Column('void_sys_date', sa.DateTime(), nullable=True),
        sa.Column('void_trans_date', sa.DateTime(), nullable=True),
        sa.Column('void_user_id', sa.Integer(), nullable=True),
    ] + _period_columns()


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False)


def _create_line_table(table: str, parent_table: str, parent_column: str) -> None:
    op.create_table(
        table,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(parent_column, sa.Integer(), nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint([parent_column], [f'{parent_table}.id'], name=f'fk_{table}_{parent_column}'),
    )
    op.create_index(f'ix_{table}_{parent_column}', table, [parent_column])
    op.create_index(f'ix_{table}_item_id', table, ['item_id'])


def _index_void_block(table: str) -> None:
    op.create_index(f'ix_{table}_voided', table, ['voided'])
    op.create_index(f'ix_{table}_void_no', table, ['void_no'])


def upgrade() -> None:
    """Create every table used by the void engine."""
    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('receipt_no', sa.String(50), nullable=True),
        sa.Column('invoice_no', sa.String(50), nullable=True),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        _money('total_due'),
        _money('discount'),
        _money('total_paid'),
        _money('change_amount'),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_void_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sales_receipt_no', 'sales', ['receipt_no'])
    op.create_index('ix_sales_invoice_no', 'sales', ['invoice_no'])
    op.create_index('ix_sales_customer_id', 'sales', ['customer_id'])
    _index_void_block('sales')
    _create_line_table('sale_items', 'sales', 'sale_id')

    op.create_table(
        'receipts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('receipt_no', sa.String(50), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        _money('total_due'),
        _money('discount'),
        _money('total_paid'),
        _money('change_amount'),
        sa.Column('currency_id', sa.String(10), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_void_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('receipt_no', name='uq_receipts_receipt_no'),
    )
    op.create_index('ix_receipts_customer_id', 'receipts', ['customer_id'])
    _index_void_block('receipts')
    _create_line_table('receipt_items', 'receipts', 'receipt_id')

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('invoice_no', sa.String(50), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        _money('total_due'),
        _money('total_paid'),
        _money('balance_due'),
        _money('paid_for_invoice'),
        sa.Column(
            'status',
            sa.Enum('OPEN', 'CLOSED', 'CANCELLED', name='invoice_status'),
            nullable=False,
            server_default='OPEN'
        ),
        sa.Column('currency_id', sa.String(10), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_void_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_no', name='uq_invoices_invoice_no'),
    )
    op.create_index('ix_invoices_customer_id', 'invoices', ['customer_id'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])
    _index_void_block('invoices')
    _create_line_table('invoice_items', 'invoices', 'invoice_id')

    op.create_table(
        'invoice_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('reference', sa.String(50), nullable=False),
        sa.Column('invoice_no', sa.String(50), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        _money('debit_amount'),
        _money('credit_amount'),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_period_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['invoice_no'], ['invoices.invoice_no'], name='fk_invoice_logs_invoice_no'),
    )
    op.create_index('ix_invoice_logs_reference', 'invoice_logs', ['reference'])
    op.create_index('ix_invoice_logs_invoice_no', 'invoice_logs', ['invoice_no'])

    op.create_table(
        'invoice_payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('receipt_no', sa.String(50), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        _money('total_due'),
        _money('total_paid'),
        sa.Column('currency_id', sa.String(10), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_void_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('receipt_no', name='uq_invoice_payments_receipt_no'),
    )
    op.create_index('ix_invoice_payments_customer_id', 'invoice_payments', ['customer_id'])
    _index_void_block('invoice_payments')

    op.create_table(
        'invoice_payment_details',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('receipt_no', sa.String(50), nullable=False),
        sa.Column('invoice_no', sa.String(50), nullable=False),
        _money('total_due'),
        _money('allocated_amount'),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['receipt_no'], ['invoice_payments.receipt_no'], name='fk_payment_details_receipt_no'),
        sa.ForeignKeyConstraint(['invoice_no'], ['invoices.invoice_no'], name='fk_payment_details_invoice_no'),
    )
    op.create_index('ix_invoice_payment_details_receipt_no', 'invoice_payment_details', ['receipt_no'])
    op.create_index('ix_invoice_payment_details_invoice_no', 'invoice_payment_details', ['invoice_no'])

    op.create_table(
        'debtors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('debtor_type', sa.String(50), nullable=True),
        _money('balance'),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id', name='uq_debtors_customer_id'),
    )

    op.create_table(
        'debtor_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('debtor_id', sa.Integer(), nullable=False),
        sa.Column('reference', sa.String(50), nullable=False),
        _money('debit_amount'),
        _money('credit_amount'),
        sa.Column('debtor_type', sa.String(50), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_period_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['debtor_id'], ['debtors.id'], name='fk_debtor_logs_debtor_id', ondelete='RESTRICT'),
        sa.UniqueConstraint('reference', name='uq_debtor_logs_reference'),
    )
    op.create_index('ix_debtor_logs_debtor_id', 'debtor_logs', ['debtor_id'])

    op.create_table(
        'voided_sales',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=True),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('receipt_no', sa.String(50), nullable=True),
        sa.Column('invoice_no', sa.String(50), nullable=True),
        _money('total_due'),
        _money('total_paid'),
        _money('balance_due'),
        _money('paid_for_invoice'),
        sa.Column('status', sa.Enum('OPEN', 'CLOSED', 'CANCELLED', name='voided_sale_status'), nullable=True),
        sa.Column(
            'void_source',
            sa.Enum('CASH_SALE', 'INVOICE_SALE', 'INVOICE_PAYMENT', name='void_source'),
            nullable=False
        ),
        sa.Column('currency_id', sa.String(10), nullable=True),
        sa.Column('reasons', sa.Text(), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_void_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_voided_sales_customer_id', 'voided_sales', ['customer_id'])
    op.create_index('ix_voided_sales_receipt_no', 'voided_sales', ['receipt_no'])
    op.create_index('ix_voided_sales_invoice_no', 'voided_sales', ['invoice_no'])
    op.create_index('ix_voided_sales_void_source', 'voided_sales', ['void_source'])
    op.create_index('ix_voided_sales_created_at', 'voided_sales', ['created_at'])
    _index_void_block('voided_sales')
    _create_line_table('voided_sale_items', 'voided_sales', 'voided_sale_id')

    op.create_table(
        'refunds',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=False),
        sa.Column('refund_no', sa.String(50), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('voided_sale_id', sa.Integer(), nullable=False),
        sa.Column('refund_amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('payment_method_id', sa.Integer(), nullable=False),
        sa.Column('remarks', sa.String(255), nullable=True),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_period_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['voided_sale_id'], ['voided_sales.id'], name='fk_refunds_voided_sale_id', ondelete='RESTRICT'),
        sa.UniqueConstraint('refund_no', name='uq_refunds_refund_no'),
    )
    op.create_index('ix_refunds_voided_sale_id', 'refunds', ['voided_sale_id'])
    op.create_index('ix_refunds_customer_id', 'refunds', ['customer_id'])

    op.create_table(
        'collections',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trans_date', sa.DateTime(), nullable=False),
        sa.Column('receipt_no', sa.String(50), nullable=False),
        sa.Column('payment_source', sa.Enum('CASH_SALE', 'INVOICE_PAYMENT', name='payment_source'), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('payment_method_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        _created_at(),
        *_period_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_collections_receipt_no', 'collections', ['receipt_no'])
    op.create_index('ix_collections_customer_id', 'collections', ['customer_id'])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        'collections',
        'refunds',
        'voided_sale_items',
        'voided_sales',
        'debtor_logs',
        'debtors',
        'invoice_payment_details',
        'invoice_payments',
        'invoice_logs',
        'invoice_items',
        'invoices',
        'receipt_items',
        'receipts',
        'sale_items',
        'sales',
    ):
        op.drop_table(table)
