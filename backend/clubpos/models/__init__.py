from .catalog import Product, ProductCategory, UnitKind, StrainType, unit_kind_for
from .members import Member, DocumentType
from .ledger import LedgerTransaction, LedgerTransactionItem, TransactionKind
from .auth import StaffUser, SessionToken

__all__ = [
    'Product', 'ProductCategory', 'UnitKind', 'StrainType', 'unit_kind_for',
    'Member', 'DocumentType',
    'LedgerTransaction', 'LedgerTransactionItem', 'TransactionKind',
    'StaffUser', 'SessionToken',
]
