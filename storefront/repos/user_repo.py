from sqlalchemy import select

from storefront.data.models.user import UserModel
from storefront.repos.base import BaseRepo, store_call


class UserRepo(BaseRepo):

    @store_call("find user")
    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    @store_call("find user")
    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    @store_call("create user")
    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    @store_call("update user")
    def update_user(self, user: UserModel, fields: dict) -> UserModel:
        for name, value in fields.items():
            setattr(user, name, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    @store_call("delete user")
    def delete_user(self, user: UserModel) -> None:
        self.db.delete(user)
        self.db.commit()
