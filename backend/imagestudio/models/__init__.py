"""
Pydantic models for MongoDB collections and request bodies.
Provides type safety and validation for database operations.
"""

from .account import USAGE_HISTORY_LIMIT, Account, HistoryEntry
from .generation import (
    AttemptOutcome,
    AttemptState,
    EnhanceRequest,
    GeneratedAsset,
    GeneratedImageRecord,
    GenerateRequest,
    GenerationAttempt,
    StyleTransferRequest,
    UpscaleRequest,
)
from .enhance_style import EnhanceStyle
from .style import StyleCreate, StyleTemplate, StyleUpdate
from .transaction import TransactionKind, TransactionRecord

__all__ = [
    "Account",
    "HistoryEntry",
    "USAGE_HISTORY_LIMIT",
    "TransactionRecord",
    "TransactionKind",
    "StyleTemplate",
    "StyleCreate",
    "StyleUpdate",
    "EnhanceStyle",
    "EnhanceRequest",
    "GenerateRequest",
    "UpscaleRequest",
    "StyleTransferRequest",
    "GeneratedAsset",
    "GeneratedImageRecord",
    "GenerationAttempt",
    "AttemptState",
    "AttemptOutcome",
]
