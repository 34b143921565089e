"""Models package - exports all SQLAlchemy models."""
# Scoping, reference data and stock
from solestock.models.company import Company
from solestock.models.contact import Contact, ContactType
from solestock.models.item import Item
from solestock.models.stock_by_size import StockBySize

# Documents
from solestock.models.document_status import DocumentStatus
from solestock.models.size_columns import SizeColumnsMixin
from solestock.models.sales_order import SalesOrder
from solestock.models.sales_order_line import SalesOrderLine
from solestock.models.invoice import Invoice
from solestock.models.invoice_line import InvoiceLine
from solestock.models.bill import Bill
from solestock.models.bill_line import BillLine
from solestock.models.return_note import ReturnNote
from solestock.models.return_note_line import ReturnNoteLine
from solestock.models.order_template import OrderTemplate
from solestock.models.order_template_line import OrderTemplateLine

# Accounting
from solestock.models.journal import Journal
from solestock.models.journal_line import JournalLine

__all__ = [
    'Company', 'Contact', 'ContactType', 'Item', 'StockBySize',
    'DocumentStatus', 'SizeColumnsMixin',
    'SalesOrder', 'SalesOrderLine', 'Invoice', 'InvoiceLine',
    'Bill', 'BillLine', 'ReturnNote', 'ReturnNoteLine',
    'OrderTemplate', 'OrderTemplateLine',
    'Journal', 'JournalLine',
]
