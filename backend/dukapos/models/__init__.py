from .auth import User, SessionToken
from .tenancy import Business
from .inventory import Category, Product
from .customers import Customer
from .sales import Sale, SaleItem
from .expenses import Expense
from .security import SecurityEvent

__all__ = [
    'User', 'SessionToken',
    'Business',
    'Category', 'Product',
    'Customer',
    'Sale', 'SaleItem',
    'Expense',
    'SecurityEvent',
]
