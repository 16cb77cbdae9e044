from dataclasses import dataclass

from ..application.services.access_control import AccessControlService
from ..application.services.admin_auth_service import AdminAuthService
from ..application.services.category_service import CategoryService
from ..application.services.comment_service import CommentService
from ..application.services.product_service import ProductService
from ..application.services.review_service import ReviewService
from ..application.services.user_auth_service import UserAuthService
from .config import Settings
from ..infrastructure.persistence.sqlite import SQLiteDatabase
from ..services.email_service import EmailService
from ..services.otp_service import OtpService
from ..services.token_service import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    database: SQLiteDatabase
    email_service: EmailService
    token_service: TokenService
    otp_service: OtpService
    access_control: AccessControlService
    user_auth_service: UserAuthService
    admin_auth_service: AdminAuthService
    category_service: CategoryService
    product_service: ProductService
    comment_service: CommentService
    review_service: ReviewService
