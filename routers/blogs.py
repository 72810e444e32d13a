from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session
from starlette import status

from auth import TokenClaims, authorize
from database import get_db
from media import ImgurClient, get_media_client
from routers.paging import Paging, get_paging
from services.blog_service import BlogService
import schemas

router = APIRouter(prefix="/api/blogs", tags=["Blogs"])

UNAUTHORIZED = {401: {"description": "Unauthorized - missing, invalid or expired token"}}
FORBIDDEN = {403: {"description": "Forbidden - role or ownership requirement not met"}}
NOT_FOUND = {404: {"description": "Blog not found"}}


@router.get(
    "",
    response_model=schemas.BlogPage,
    summary="List blogs",
    description="Return one page of blogs, each with the author's first and last name.",
    responses={200: {"description": "Page of blogs returned successfully"}, **UNAUTHORIZED},
)
def list_blogs(
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("blogs.list")),
):
    return BlogService(db).list_blogs(paging.page, paging.page_size)


@router.get(
    "/search",
    response_model=schemas.BlogPage,
    summary="Search blogs",
    description=(
        "Find blogs whose title contains the query and blogs written by users whose name contains it. "
        "TotalCount is the sum of both match counts and may exceed the number of distinct blogs."
    ),
    responses={
        200: {"description": "Search results returned successfully"},
        400: {"description": "Empty query"},
        **UNAUTHORIZED,
    },
)
def search_blogs(
        query: str = Query(..., examples=["alps"]),
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("blogs.search")),
):
    return BlogService(db).search_blogs(query, paging.page, paging.page_size)


@router.get(
    "/user/{user_id}",
    response_model=schemas.BlogPage,
    summary="List blogs of a user",
    responses={
        200: {"description": "Page of the user's blogs returned successfully"},
        404: {"description": "No blogs found for this user on this page"},
        **UNAUTHORIZED,
    },
)
def list_user_blogs(
        user_id: str,
        paging: Paging = Depends(get_paging),
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("blogs.by_user")),
):
    return BlogService(db).list_user_blogs(user_id, paging.page, paging.page_size)


@router.get(
    "/{blog_id}",
    response_model=schemas.BlogOut,
    summary="Get a blog by ID",
    responses={200: {"description": "Blog returned successfully"}, **UNAUTHORIZED, **NOT_FOUND},
)
def get_blog(
        blog_id: str,
        db: Session = Depends(get_db),
        _: TokenClaims = Depends(authorize("blogs.get")),
):
    return BlogService(db).get_blog(blog_id)


@router.post(
    "",
    response_model=schemas.BlogOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a blog",
    description="Upload the cover image to the image host, then store the blog with a server-assigned timestamp.",
    responses={
        201: {"description": "Blog created successfully"},
        400: {"description": "Invalid image or image host failure"},
        404: {"description": "Owning user not found"},
        **UNAUTHORIZED,
        **FORBIDDEN,
    },
)
def create_blog(
        title: str = Form(..., min_length=1, examples=["Hiking the Dinaric Alps"]),
        description: str = Form(..., min_length=1, examples=["Three days on the Via Dinarica."]),
        user_id: str = Form(...),
        image: UploadFile = File(...),
        db: Session = Depends(get_db),
        media: ImgurClient = Depends(get_media_client),
        _: TokenClaims = Depends(authorize("blogs.create")),
):
    return BlogService(db, media).create_blog(title, description, user_id, image)


@router.put(
    "/{blog_id}",
    response_model=schemas.BlogOut,
    summary="Update a blog",
    description=(
        "Replace the text fields that are provided. When a new image is sent, the old one is deleted "
        "from the image host first; if that fails nothing is changed."
    ),
    responses={
        200: {"description": "Blog updated successfully"},
        400: {"description": "Invalid image or image host failure"},
        **UNAUTHORIZED,
        **FORBIDDEN,
        **NOT_FOUND,
    },
)
def update_blog(
        blog_id: str,
        title: Optional[str] = Form(None, min_length=1),
        description: Optional[str] = Form(None, min_length=1),
        image: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        media: ImgurClient = Depends(get_media_client),
        _: TokenClaims = Depends(authorize("blogs.update")),
):
    return BlogService(db, media).update_blog(blog_id, title, description, image)


@router.delete(
    "/{blog_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a blog",
    description="Delete the cover image from the image host, then the blog. The blog is kept if the image cannot be deleted.",
    responses={
        204: {"description": "Blog deleted"},
        400: {"description": "Image host failure, blog kept"},
        **UNAUTHORIZED,
        **FORBIDDEN,
        **NOT_FOUND,
    },
)
def delete_blog(
        blog_id: str,
        db: Session = Depends(get_db),
        media: ImgurClient = Depends(get_media_client),
        _: TokenClaims = Depends(authorize("blogs.delete")),
):
    BlogService(db, media).delete_blog(blog_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
