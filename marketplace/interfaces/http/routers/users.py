"""User endpoints: registration, login, profile and balance top-up."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.container import ApplicationContainer
from marketplace.core.security import create_access_token
from marketplace.core.validation import MAX_TOPUP_AMOUNT
from marketplace.interfaces.http.deps import (
    get_container,
    get_current_admin,
    get_current_user,
    get_db_session,
    get_user_service,
)
from marketplace.interfaces.http.envelope import ok
from marketplace.modules.common import UNSET
from marketplace.modules.users import User, UserCreateInput, UserService, UserUpdateInput
from marketplace.schemas import (
    Envelope,
    LoginRequest,
    TokenResponse,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()


def _to_schema(user: User) -> UserResponse:
    return UserResponse.model_validate(user)


@router.post(
    "/register",
    response_model=Envelope[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    payload: UserRegisterRequest,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    user = await service.register(
        UserCreateInput(name=payload.name, email=payload.email, password=payload.password)
    )
    await db.commit()
    return ok(_to_schema(user), "User registered")


@router.post("/login", response_model=Envelope[TokenResponse], summary="Log in with email and password")
async def login(
    payload: LoginRequest,
    service: UserService = Depends(get_user_service),
    container: ApplicationContainer = Depends(get_container),
):
    user = await service.authenticate(payload.email, payload.password)
    token = create_access_token(user, container.settings.security)
    return ok(TokenResponse(access_token=token, user=_to_schema(user)), "Login successful")


@router.get("/all", response_model=Envelope[list[UserResponse]], summary="List all users")
async def list_users(
    _: User = Depends(get_current_admin),
    service: UserService = Depends(get_user_service),
):
    users = await service.list_users()
    return ok([_to_schema(user) for user in users], "Users found")


@router.post("/topUp", response_model=Envelope[UserResponse], summary="Top up a user's balance")
async def top_up(
    user_id: str = Query(..., alias="id", min_length=1),
    amount: int = Query(..., gt=0, le=MAX_TOPUP_AMOUNT),
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    user = await service.top_up(user_id, amount, actor)
    await db.commit()
    return ok(_to_schema(user), "Top up successful")


@router.get("/email/{email}", response_model=Envelope[UserResponse], summary="Find a user by email")
async def get_user_by_email(
    email: str,
    _: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_by_email(email)
    return ok(_to_schema(user), "User found")


@router.get("/{user_id}", response_model=Envelope[UserResponse], summary="Get a user by ID")
async def get_user(
    user_id: str,
    _: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return ok(_to_schema(user), "User found")


@router.put("/{user_id}", response_model=Envelope[UserResponse], summary="Update a user")
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    provided = payload.model_fields_set
    changes = UserUpdateInput(
        **{
            name: getattr(payload, name) if name in provided else UNSET
            for name in ("name", "email", "password", "role", "store_id")
        }
    )
    user = await service.update_user(user_id, changes, actor)
    await db.commit()
    return ok(_to_schema(user), "User updated")


@router.delete("/{user_id}", response_model=Envelope[UserResponse], summary="Delete a user")
async def delete_user(
    user_id: str,
    actor: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    user = await service.delete_user(user_id, actor)
    await db.commit()
    return ok(_to_schema(user), "User deleted")
