# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import Forbidden
from storefront.services.address_client import AddressClient
from storefront.services.change_events import ChangePublisher
from storefront.services.notification_service import NotificationService
from storefront.repos.user_repo import UserRepo


@lru_cache
def get_publisher() -> ChangePublisher:
    #jeden klient redis na proces
    return ChangePublisher()


def get_notifier() -> NotificationService:
    return NotificationService()


def get_address_client() -> AddressClient:
    return AddressClient()


def require_admin(user_id: int = Query(...), db: Session = Depends(get_db)) -> int:
    user = UserRepo(db).get_user(user_id)
    if not user or not user.is_admin:
        raise Forbidden("Admin privileges required")
    return user_id
