from typing import Dict, Iterable

from sqlalchemy import select

from storefront.data.models.user import UserModel
from storefront.repos.base import BaseRepo


class UserRepo(BaseRepo):

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(select(UserModel).where(UserModel.email == email)).scalar_one_or_none()

    def get_users(self, user_ids: Iterable[int]) -> Dict[int, UserModel]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(UserModel).where(UserModel.id.in_(ids))).scalars()
        return {u.id: u for u in rows}

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.commit()
        self.db.refresh(user)
        return user

    def save(self, user: UserModel) -> UserModel:
        self.commit()
        self.db.refresh(user)
        return user
