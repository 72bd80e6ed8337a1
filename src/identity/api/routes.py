"""FastAPI endpoints for the Identity domain: accounts and sessions."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from identity.api.dependencies import current_requester, current_token
from identity.api.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterUserRequest,
    StatusResponse,
    UserIdResponse,
    UserProfileResponse,
)
from identity.session.login import EndSession, authenticate
from identity.shared.password import hash_password
from identity.user.registration import RegisterUser
from identity.user.user import User
from shared.access import Requester

# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
        phone=body.phone,
        role="customer",
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.get("/me", response_model=UserProfileResponse)
async def get_me(requester: Requester = Depends(current_requester)) -> UserProfileResponse:
    user = current_domain.repository_for(User).get(requester.user_id)
    return UserProfileResponse(**user.to_profile())


# ---------------------------------------------------------------------------
# Auth Router
# ---------------------------------------------------------------------------
auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest) -> LoginResponse:
    token, user = authenticate(body.email, body.password)
    return LoginResponse(token=token, user=UserProfileResponse(**user.to_profile()))


@auth_router.post("/logout", response_model=StatusResponse)
async def logout(token: str = Depends(current_token)) -> StatusResponse:
    current_domain.process(EndSession(token=token), asynchronous=False)
    return StatusResponse()
