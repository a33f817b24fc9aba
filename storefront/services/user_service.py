from storefront.data.models.user import UserModel
from storefront.domain.errors import (
    AuthError,
    EmailInUse,
    ForbiddenError,
    UserAlreadyExists,
    UserNotFound,
    ValidationError,
)
from storefront.domain.schemas import TokenOut, UserOut, UserSignup, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.services.event_service import EventService
from storefront.utils.security import generate_token, hash_password, verify_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, repo: UserRepo, events=EventService):
        self.repo = repo
        self.events = events

    def signup(self, payload: UserSignup) -> UserOut:
        if self.repo.get_user(payload.user_id):
            raise UserAlreadyExists()
        if self.repo.get_by_email(payload.email):
            raise EmailInUse()

        user = UserModel(
            user_id=payload.user_id,
            email=payload.email,
            password=hash_password(payload.password),
            role="user",
        )
        created = self.repo.create_user(user)
        logger.info(f"User {created.user_id} signed up")

        self.events.user_event("signup", created.user_id, created.email, created.role)
        return UserOut.model_validate(created)

    def login(self, user_id: str, password: str) -> TokenOut:
        user = self.repo.get_user(user_id)
        # same message for unknown user and wrong password
        if not user or not verify_password(password, user.password):
            raise AuthError("Invalid credentials")

        token = generate_token(user.user_id, user.role)
        logger.info(f"User {user.user_id} logged in")

        self.events.user_event("login", user.user_id, user.email, user.role)
        return TokenOut(token=token)

    def update_user(self, user_id: str, updates: UserUpdate) -> UserOut:
        user = self._get(user_id)
        # admins may only edit plain users
        if user.role != "user":
            raise ForbiddenError("Unauthorized to update user")

        fields = updates.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            raise ValidationError("No valid fields to update")

        if "email" in fields:
            existing = self.repo.get_by_email(fields["email"])
            if existing and existing.user_id != user_id:
                raise EmailInUse()
        if "password" in fields:
            fields["password"] = hash_password(fields["password"])

        updated = self.repo.update_user(user, fields)
        logger.info(f"User {user_id} updated ({', '.join(sorted(fields))})")
        return UserOut.model_validate(updated)

    def delete_user(self, user_id: str) -> None:
        user = self._get(user_id)
        if user.role != "user":
            raise ForbiddenError("Unauthorized to delete user")
        self.repo.delete_user(user)
        logger.info(f"User {user_id} deleted")

    def delete_user_any(self, user_id: str) -> None:
        user = self._get(user_id)
        if user.role == "superadmin":
            raise ForbiddenError("Unauthorized to delete user")
        self.repo.delete_user(user)
        logger.info(f"User {user_id} ({user.role}) deleted")

    def update_role(self, user_id: str, role: str) -> UserOut:
        user = self._get(user_id)
        if role not in ("admin", "user"):
            raise ValidationError("Invalid role")
        updated = self.repo.update_user(user, {"role": role})
        logger.info(f"User {user_id} role set to {role}")
        return UserOut.model_validate(updated)

    def _get(self, user_id: str) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound()
        return user
