from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette import status

from auth import TokenClaims, authorize
from database import get_db
from routers.paging import Paging, get_paging
from services.comment_service import CommentService
import schemas

router = APIRouter(prefix="/api/comments", tags=["Comments"])

UNAUTHORIZED = {401: {"description": "Unauthorized - missing, invalid or expired token"}}
FORBIDDEN = {403: {"description": "Forbidden - not the author of this comment"}}
NOT_FOUND = {404: {"description": "Comment, blog or user not found"}}


@router.get(
    "",
    response_model=schemas.CommentPage,
    summary="List comments",
    responses={200: {"description": "Page of comments returned successfully"}, **UNAUTHORIZED},
)
def list_comments(
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.list")),
):
    return CommentService(db).list_comments(paging.page, paging.page_size)


@router.get(
    "/blog/{blog_id}",
    response_model=schemas.CommentPage,
    summary="List comments on a blog",
    responses={200: {"description": "Page of comments returned successfully"}, **UNAUTHORIZED},
)
def list_blog_comments(
        blog_id: str,
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.by_blog")),
):
    return CommentService(db).list_blog_comments(blog_id, paging.page, paging.page_size)


@router.get(
    "/user/{user_id}",
    response_model=schemas.CommentPage,
    summary="List comments written by a user",
    responses={
        200: {"description": "Page of comments returned successfully"},
        404: {"description": "User not found"},
        **UNAUTHORIZED,
    },
)
def list_user_comments(
        user_id: str,
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.by_user")),
):
    return CommentService(db).list_user_comments(user_id, paging.page, paging.page_size)


@router.get(
    "/{comment_id}",
    response_model=schemas.CommentOut,
    summary="Get a comment by ID",
    responses={200: {"description": "Comment returned successfully"}, **UNAUTHORIZED, **NOT_FOUND},
)
def get_comment(
        comment_id: str,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.get")),
):
    return CommentService(db).get_comment(comment_id)


@router.post(
    "",
    response_model=schemas.CommentOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a comment",
    description="Create a comment on an existing blog by an existing user.",
    responses={201: {"description": "Comment created successfully"}, **UNAUTHORIZED, **FORBIDDEN, **NOT_FOUND},
)
def create_comment(
        comment: schemas.CommentCreate,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.create")),
):
    return CommentService(db).create_comment(comment)


@router.put(
    "/{comment_id}",
    response_model=schemas.CommentOut,
    summary="Replace a comment",
    description="Replace blog, user and content of a comment. The creation timestamp is kept.",
    responses={200: {"description": "Comment updated successfully"}, **UNAUTHORIZED, **FORBIDDEN, **NOT_FOUND},
)
def update_comment(
        comment_id: str,
        comment: schemas.CommentCreate,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.update")),
):
    return CommentService(db).update_comment(comment_id, comment)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
    responses={204: {"description": "Comment deleted"}, **UNAUTHORIZED, **FORBIDDEN, **NOT_FOUND},
)
def delete_comment(
        comment_id: str,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("comments.delete")),
):
    CommentService(db).delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
