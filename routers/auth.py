from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette import status

from config import Settings, get_app_settings
from database import get_db
from services.auth_service import AuthService
import schemas

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=schemas.UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Register a user with a unique email address. New accounts always get the USER role.",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Email already registered"},
    },
)
def register(
        user: schemas.UserCreate,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
):
    auth_service = AuthService(db, settings)
    return auth_service.register_user(user.first_name, user.last_name, user.email, user.password)


@router.post(
    "/login",
    response_model=schemas.Token,
    status_code=status.HTTP_200_OK,
    summary="Log in and obtain an access token",
    description="Authenticate with email and password to obtain a signed token valid for 24 hours.",
    responses={
        200: {"description": "Access token returned successfully"},
        401: {"description": "Invalid email or password"},
    },
)
def login(
        user: schemas.UserLogin,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_app_settings),
):
    auth_service = AuthService(db, settings)
    return auth_service.login_user(user.email, user.password)
