from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import EmailTaken, IncompleteAddress, UserNotFound
from storefront.domain.schemas import AddressIn, UserCreate, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.services.address_client import AddressClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session, address_client: AddressClient | None = None):
        self.repo = UserRepo(db)
        self.address_client = address_client or AddressClient()

    def create_user(self, payload: UserCreate) -> UserRead:
        existing = self.repo.get_user(payload.id)
        if existing:
            return UserRead.model_validate(existing)

        if payload.email and self.repo.get_by_email(payload.email):
            raise EmailTaken(payload.email)

        user = UserModel(id=payload.id, name=payload.name, email=payload.email, role=payload.role)
        created = self.repo.create_user(user)
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return UserRead.model_validate(user)

    def is_admin(self, user_id: int) -> bool:
        user = self.repo.get_user(user_id)
        return bool(user and user.is_admin)

    def save_address(self, user_id: int, payload: AddressIn) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)

        address = payload.model_dump()
        missing = [f for f in ("city", "postal_code") if not (address.get(f) or "").strip()]
        if missing:
            raise IncompleteAddress(missing)

        if not self.address_client.is_valid(address):
            raise ValueError("The provided address is not valid")

        user.address_line1 = payload.address_line1
        user.city = payload.city.strip()
        user.postal_code = payload.postal_code.strip()
        user.country = payload.country
        saved = self.repo.save(user)

        logger.info(f"Address of user {user_id} updated")
        return UserRead.model_validate(saved)
