"""
Registration and login endpoints.

Error bodies carry the message in ``error`` (see ``main``); the web
client shows that text to the user unchanged.
"""

from fastapi import APIRouter, HTTPException, status

from geojot_api.app.api.errors import to_http_exception
from geojot_api.app.core.security import create_access_token
from geojot_api.app.schemas.user import LoginResponse, MessageResponse, UserLogin, UserRegister
from geojot_api.app.services.errors import ServiceError
from geojot_api.app.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister) -> MessageResponse:
    """Create an account.

    Answers 400 with the first broken rule: username length, email
    format, existing email, existing username or the password policy
    (which also lists ``failedRules``).
    """
    try:
        await UserService.create_user(payload)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(payload: UserLogin) -> LoginResponse:
    """Check credentials and issue a bearer token."""
    user = await UserService.authenticate(payload.username, payload.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    token = create_access_token({"sub": user.username})
    return LoginResponse(user=user, token=token)
