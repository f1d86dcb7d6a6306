"""
Repository layer for MongoDB data access.
Provides clean abstraction over database operations.
"""

from .account_repository import AccountRepository
from .enhance_style_repository import EnhanceStyleRepository
from .generated_image_repository import GeneratedImageRepository
from .history_repository import HistoryRepository
from .style_repository import StyleRepository
from .transaction_repository import TransactionRepository

__all__ = [
    "AccountRepository",
    "EnhanceStyleRepository",
    "HistoryRepository",
    "TransactionRepository",
    "StyleRepository",
    "GeneratedImageRepository",
]
