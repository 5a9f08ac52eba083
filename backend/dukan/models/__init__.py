from .inventory import Product
from .sales import Sale, SaleItem, PAYMENT_METHODS
from .expenses import Expense

__all__ = [
    'Product',
    'Sale', 'SaleItem', 'PAYMENT_METHODS',
    'Expense',
]
