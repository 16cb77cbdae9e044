from fastapi import Depends, Request

from .container import ApplicationContainer


def get_container(request: Request) -> ApplicationContainer:
    container = getattr(request.app.state, "container", None)
    if not container:
        raise RuntimeError("Application container not initialised.")
    return container


def get_access_control(container: ApplicationContainer = Depends(get_container)):
    return container.access_control


def get_user_auth_service(container: ApplicationContainer = Depends(get_container)):
    return container.user_auth_service


def get_admin_auth_service(container: ApplicationContainer = Depends(get_container)):
    return container.admin_auth_service


def get_category_service(container: ApplicationContainer = Depends(get_container)):
    return container.category_service


def get_product_service(container: ApplicationContainer = Depends(get_container)):
    return container.product_service


def get_comment_service(container: ApplicationContainer = Depends(get_container)):
    return container.comment_service


def get_review_service(container: ApplicationContainer = Depends(get_container)):
    return container.review_service
