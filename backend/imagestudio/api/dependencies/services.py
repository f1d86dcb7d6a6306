"""
Repository and service dependencies for the image, style and billing APIs.
"""

from fastapi import Depends, Request

from ...core.config import Settings, get_settings
from ...database.mongodb import (
    ENHANCE_STYLES_COLLECTION,
    GENERATED_IMAGES_COLLECTION,
    STYLES_COLLECTION,
    TRANSACTIONS_COLLECTION,
    USERS_COLLECTION,
    MongoDB,
)
from ...database.repositories import (
    AccountRepository,
    EnhanceStyleRepository,
    GeneratedImageRepository,
    HistoryRepository,
    StyleRepository,
    TransactionRepository,
)
from ...services.billing_service import BillingService
from ...services.credit_service import CreditService
from ...services.gateway import GenerationGateway
from ...services.generation_orchestrator import GenerationOrchestrator
from ...services.paystack_client import PaystackClient
from ...services.style_cache import StyleCache
from ...services.style_service import StyleService
from .auth import get_account_repository, get_mongodb

# ===== Repository Dependencies =====


def get_history_repository(mongodb: MongoDB = Depends(get_mongodb)) -> HistoryRepository:
    """Get usage history repository (embedded in the users collection)."""
    return HistoryRepository(mongodb.get_collection(USERS_COLLECTION))


def get_transaction_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> TransactionRepository:
    """Get transaction repository instance."""
    return TransactionRepository(mongodb.get_collection(TRANSACTIONS_COLLECTION))


def get_style_repository(mongodb: MongoDB = Depends(get_mongodb)) -> StyleRepository:
    """Get style repository instance."""
    return StyleRepository(mongodb.get_collection(STYLES_COLLECTION))


def get_enhance_style_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> EnhanceStyleRepository:
    """Get enhance style preset repository instance."""
    return EnhanceStyleRepository(mongodb.get_collection(ENHANCE_STYLES_COLLECTION))


def get_generated_image_repository(
    mongodb: MongoDB = Depends(get_mongodb),
) -> GeneratedImageRepository:
    """Get generated image repository instance."""
    return GeneratedImageRepository(mongodb.get_collection(GENERATED_IMAGES_COLLECTION))


# ===== Process-wide components (created in the app lifespan) =====


def get_gateway(request: Request) -> GenerationGateway:
    gateway: GenerationGateway = request.app.state.gateway
    return gateway


def get_paystack_client(request: Request) -> PaystackClient:
    paystack: PaystackClient = request.app.state.paystack
    return paystack


def get_style_cache(request: Request) -> StyleCache:
    cache: StyleCache = request.app.state.style_cache
    return cache


# ===== Service Dependencies =====


def get_credit_service(
    account_repo: AccountRepository = Depends(get_account_repository),
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
) -> CreditService:
    """Get credit ledger service instance."""
    return CreditService(account_repo, transaction_repo)


def get_generation_orchestrator(
    credit_service: CreditService = Depends(get_credit_service),
    gateway: GenerationGateway = Depends(get_gateway),
    account_repo: AccountRepository = Depends(get_account_repository),
    history_repo: HistoryRepository = Depends(get_history_repository),
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
    style_repo: StyleRepository = Depends(get_style_repository),
    generated_image_repo: GeneratedImageRepository = Depends(
        get_generated_image_repository
    ),
) -> GenerationOrchestrator:
    """Get generation orchestrator instance."""
    return GenerationOrchestrator(
        credit_service=credit_service,
        gateway=gateway,
        account_repo=account_repo,
        history_repo=history_repo,
        transaction_repo=transaction_repo,
        style_repo=style_repo,
        generated_image_repo=generated_image_repo,
    )


def get_style_service(
    style_repo: StyleRepository = Depends(get_style_repository),
    cache: StyleCache = Depends(get_style_cache),
) -> StyleService:
    """Get style service instance."""
    return StyleService(style_repo, cache)


def get_billing_service(
    credit_service: CreditService = Depends(get_credit_service),
    transaction_repo: TransactionRepository = Depends(get_transaction_repository),
    paystack: PaystackClient = Depends(get_paystack_client),
    mongodb: MongoDB = Depends(get_mongodb),
    settings: Settings = Depends(get_settings),
) -> BillingService:
    """Get billing service instance."""
    return BillingService(credit_service, transaction_repo, paystack, settings, mongodb)


__all__ = [
    "get_history_repository",
    "get_transaction_repository",
    "get_style_repository",
    "get_enhance_style_repository",
    "get_generated_image_repository",
    "get_gateway",
    "get_paystack_client",
    "get_style_cache",
    "get_credit_service",
    "get_generation_orchestrator",
    "get_style_service",
    "get_billing_service",
]
