from fastapi import APIRouter, Depends, status

from ridebook.services.auth_service.dependencies import get_auth_service
from ridebook.services.auth_service.service import AuthService
from ridebook.shared.models.account_dto import (
    AccountDTO,
    LoginRequest,
    RegisterUserRequest,
    UserAuthResult,
)
from ridebook.shared.models.common import SuccessResponse, SuccessType

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=SuccessResponse[AccountDTO],
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    request: RegisterUserRequest,
    service: AuthService = Depends(get_auth_service),
):
    user = await service.register_user(request)
    return SuccessResponse.create(SuccessType.CREATED, user, "User registered successfully")


@router.post("/login", response_model=SuccessResponse[UserAuthResult])
async def login_user(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    result = await service.login_user(request)
    return SuccessResponse.create(SuccessType.AUTHENTICATED, result, "Login successful")
