from fastapi import APIRouter, Depends

from storefront.api.deps import get_user_service, require_roles
from storefront.domain.schemas import (
    MessageOut,
    RoleUpdate,
    TokenOut,
    UserLogin,
    UserOut,
    UserSignup,
    UserUpdate,
)
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(
    prefix="/admin/user",
    tags=["users"],
    dependencies=[Depends(require_roles("admin", "superadmin"))],
)
superadmin_router = APIRouter(
    prefix="/superadmin/user",
    tags=["users"],
    dependencies=[Depends(require_roles("superadmin"))],
)


@router.post("/signup", response_model=UserOut, status_code=201)
def signup(payload: UserSignup, service: UserService = Depends(get_user_service)):
    return service.signup(payload)


@router.post("/login", response_model=TokenOut)
def login(payload: UserLogin, service: UserService = Depends(get_user_service)):
    return service.login(payload.user_id, payload.password)


@admin_router.put("/{user_id}", response_model=UserOut)
def update_user(user_id: str, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    return service.update_user(user_id, payload)


@admin_router.delete("/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    service.delete_user(user_id)
    return MessageOut(message="User deleted successfully")


@superadmin_router.put("/role/{user_id}", response_model=UserOut)
def update_user_role(user_id: str, payload: RoleUpdate, service: UserService = Depends(get_user_service)):
    return service.update_role(user_id, payload.role)


@superadmin_router.delete("/{user_id}", response_model=MessageOut)
def delete_user_any(user_id: str, service: UserService = Depends(get_user_service)):
    service.delete_user_any(user_id)
    return MessageOut(message="User deleted successfully")
