"""Create the administrator account interactively.

Reads ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_USERNAME from the environment or a
``.env`` file and prompts for anything missing.
"""

import getpass
import os

from dotenv import load_dotenv

from storefront.core.app_factory import _build_container
from storefront.core.config import Settings
from storefront.core.logging import configure_logging
from storefront.domain.errors import ValidationError


def main() -> None:
    load_dotenv()
    configure_logging()
    settings = Settings()

    email = os.getenv("ADMIN_EMAIL") or input("Admin email: ").strip()
    username = os.getenv("ADMIN_USERNAME") or input("Admin username [admin]: ").strip() or "admin"
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ").strip()

    container = _build_container(settings)
    try:
        admin = container.admin_auth_service.ensure_default_admin(email, password, username=username)
    except ValidationError as exc:
        raise SystemExit(exc.message) from exc
    finally:
        container.database.close()

    if admin is None:
        raise SystemExit("Email and password are required.")
    print(f"Administrator ready: {admin.email} ({admin.username})")


if __name__ == "__main__":
    main()
