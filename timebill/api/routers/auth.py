"""Authentication routes: register, login and current user."""

from fastapi import APIRouter, Depends, status

from timebill.api.dependencies import get_auth_service, get_current_user
from timebill.models.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from timebill.services import AuthService, CurrentUser

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.register(payload)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.login(payload)
    return AuthResponse(user=UserOut.model_validate(user), token=token)


@router.get("/me", response_model=UserOut)
def me(
    user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return service.get_profile(user.id)
