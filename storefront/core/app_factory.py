from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.access_control import AccessControlService
from ..application.services.admin_auth_service import AdminAuthService
from ..application.services.category_service import CategoryService
from ..application.services.comment_service import CommentService
from ..application.services.product_service import ProductService
from ..application.services.review_service import ReviewService
from ..application.services.user_auth_service import UserAuthService
from ..domain.errors import ValidationError
from ..infrastructure.persistence.sqlite import SQLiteDatabase
from ..infrastructure.repositories.category_repository import CategoryRepository
from ..infrastructure.repositories.comment_repository import CommentRepository
from ..infrastructure.repositories.otp_repository import OtpRepository
from ..infrastructure.repositories.product_repository import ProductRepository
from ..infrastructure.repositories.refresh_token_repository import RefreshTokenRepository
from ..infrastructure.repositories.review_repository import ReviewRepository
from ..infrastructure.repositories.user_repository import UserRepository
from ..presentation.api.error_handling import register_exception_handlers
from ..presentation.api.routers import admin_auth as admin_auth_router
from ..presentation.api.routers import admin_categories as admin_categories_router
from ..presentation.api.routers import admin_comments as admin_comments_router
from ..presentation.api.routers import admin_products as admin_products_router
from ..presentation.api.routers import admin_reviews as admin_reviews_router
from ..presentation.api.routers import public_categories as public_categories_router
from ..presentation.api.routers import public_products as public_products_router
from ..presentation.api.routers import user_auth as user_auth_router
from ..presentation.api.routers import user_comments as user_comments_router
from ..presentation.api.routers import user_reviews as user_reviews_router
from ..services.email_service import EmailService
from ..services.otp_service import OtpService
from ..services.password_hasher import PasswordHasher
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)

_ROUTERS = (
    user_auth_router,
    admin_auth_router,
    admin_categories_router,
    admin_products_router,
    admin_comments_router,
    admin_reviews_router,
    user_comments_router,
    user_reviews_router,
    public_categories_router,
    public_products_router,
)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="Storefront API", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app, expose_error_details=settings.expose_error_details)

    for module in _ROUTERS:
        app.include_router(module.router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


def _build_container(settings: Settings) -> ApplicationContainer:
    database = SQLiteDatabase(settings.database_path)
    users = UserRepository(database)
    categories = CategoryRepository(database)
    products = ProductRepository(database)

    email_service = EmailService(
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_username=settings.smtp_username,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email,
        from_name=settings.mail_from_name,
    )
    token_service = TokenService(
        RefreshTokenRepository(database),
        secret_key=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        access_token_exp_minutes=settings.access_token_exp_minutes,
        password_reset_exp_minutes=settings.password_reset_exp_minutes,
        refresh_token_exp_days=settings.refresh_token_exp_days,
    )
    otp_service = OtpService(OtpRepository(database), expiry_minutes=settings.otp_exp_minutes)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    user_auth_service = UserAuthService(
        database,
        users,
        token_service,
        otp_service,
        hasher,
        email_service,
        frontend_base_url=settings.frontend_base_url,
        otp_expiry_minutes=settings.otp_exp_minutes,
        otp_resend_grace_seconds=settings.otp_resend_grace_seconds,
        password_reset_exp_minutes=settings.password_reset_exp_minutes,
    )
    admin_auth_service = AdminAuthService(database, users, token_service, hasher)

    return ApplicationContainer(
        settings=settings,
        database=database,
        email_service=email_service,
        token_service=token_service,
        otp_service=otp_service,
        access_control=AccessControlService(users, token_service),
        user_auth_service=user_auth_service,
        admin_auth_service=admin_auth_service,
        category_service=CategoryService(database, categories),
        product_service=ProductService(database, products, categories),
        comment_service=CommentService(database, CommentRepository(database), products),
        review_service=ReviewService(database, ReviewRepository(database), products),
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        container = _build_container(settings)
        container.token_service.purge_expired_refresh_tokens()

        if settings.seed_admin_enabled:
            try:
                container.admin_auth_service.ensure_default_admin(
                    settings.admin_default_email,
                    settings.admin_default_password,
                    username=settings.admin_default_username,
                )
            except ValidationError as exc:
                logger.warning("Unable to seed default administrator: %s", exc.message)

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("Storefront API ready (database=%s)", settings.database_path)

        try:
            yield
        finally:
            container.database.close()

    return lifespan
