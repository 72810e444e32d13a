from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette import status

from auth import TokenClaims, authorize
from database import get_db
from media import ImgurClient, get_media_client
from routers.paging import Paging, get_paging
from services.user_service import UserService
import schemas

router = APIRouter(prefix="/api/users", tags=["Users"])

UNAUTHORIZED = {401: {"description": "Unauthorized - missing, invalid or expired token"}}
FORBIDDEN = {403: {"description": "Forbidden - role or ownership requirement not met"}}
NOT_FOUND = {404: {"description": "User not found"}}


@router.get(
    "",
    response_model=schemas.UserPage,
    summary="List users",
    description="Return one page of users together with the total count and page metadata.",
    responses={200: {"description": "Page of users returned successfully"}, **UNAUTHORIZED, **FORBIDDEN},
)
def list_users(
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("users.list")),
):
    return UserService(db).list_users(paging.page, paging.page_size)


@router.get(
    "/all",
    response_model=list[schemas.UserOut],
    summary="List every user",
    description="Return all users without paging. Requires the ADMIN role.",
    responses={200: {"description": "All users returned successfully"}, **UNAUTHORIZED, **FORBIDDEN},
)
def list_all_users(
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("users.list_all")),
):
    return UserService(db).list_all_users()


@router.get(
    "/me",
    response_model=schemas.UserOut,
    summary="Get the current user",
    description="Return the user identified by the presented token.",
    responses={200: {"description": "User returned successfully"}, **UNAUTHORIZED, **NOT_FOUND},
)
def get_me(
        db: Session = Depends(get_db),
        claims: TokenClaims = Depends(authorize("users.get")),
):
    return UserService(db).get_user(claims.sub)


@router.get(
    "/{user_id}",
    response_model=schemas.UserOut,
    summary="Get a user by ID",
    responses={200: {"description": "User returned successfully"}, **UNAUTHORIZED, **FORBIDDEN, **NOT_FOUND},
)
def get_user(
        user_id: str,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("users.get")),
):
    return UserService(db).get_user(user_id)


@router.post(
    "",
    response_model=schemas.UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    description="Create a user with an explicit role. Requires the ADMIN role.",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Email already registered"},
        **UNAUTHORIZED,
        **FORBIDDEN,
    },
)
def create_user(
        user: schemas.AdminUserCreate,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("users.create")),
):
    return UserService(db).create_user(user)


@router.put(
    "/{user_id}",
    response_model=schemas.UserOut,
    summary="Replace a user",
    description="Replace name, email and role of a user; the password is changed only when given. Only an ADMIN may change a role.",
    responses={
        200: {"description": "User updated successfully"},
        400: {"description": "Email already registered"},
        **UNAUTHORIZED,
        **FORBIDDEN,
        **NOT_FOUND,
    },
)
def update_user(
        user_id: str,
        user: schemas.UserUpdate,
        db: Session = Depends(get_db),
        claims: TokenClaims = Depends(authorize("users.update")),
):
    return UserService(db).update_user(user_id, user, caller_role=claims.role)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
    description="Delete a user record. Blogs and comments written by the user are kept.",
    responses={204: {"description": "User deleted"}, **UNAUTHORIZED, **FORBIDDEN, **NOT_FOUND},
)
def delete_user(
        user_id: str,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("users.delete")),
):
    UserService(db).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/uploadImage",
    response_model=schemas.UserOut,
    summary="Upload a profile image",
    description="Upload an image to the image host and store its link on the user.",
    responses={
        200: {"description": "Profile image stored"},
        400: {"description": "Invalid image or image host failure"},
        **UNAUTHORIZED,
        **FORBIDDEN,
        **NOT_FOUND,
    },
)
def upload_image(
        user_id: str,
        image: UploadFile = File(...),
        db: Session = Depends(get_db),
        media: ImgurClient = Depends(get_media_client),
        _: TokenClaims = Depends(authorize("users.upload_image")),
):
    return UserService(db, media).upload_image(user_id, image)


@router.delete(
    "/{user_id}/deleteImage",
    response_model=schemas.UserOut,
    summary="Delete the profile image",
    description="Delete the profile image from the image host, then clear it on the user.",
    responses={
        200: {"description": "Profile image removed"},
        400: {"description": "No image stored or image host failure"},
        **UNAUTHORIZED,
        **FORBIDDEN,
        **NOT_FOUND,
    },
)
def delete_image(
        user_id: str,
        db: Session = Depends(get_db),
        media: ImgurClient = Depends(get_media_client),
        _: TokenClaims = Depends(authorize("users.delete_image")),
):
    return UserService(db, media).delete_image(user_id)
