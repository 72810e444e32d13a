# services/comment_service.py
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session
from starlette import status

from models import Blog, Comment, User, utcnow
import crud
import schemas

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_404(self, comment_id: str) -> Comment:
        comment = crud.find_by_id(self.db, Comment, comment_id)
        if not comment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
        return comment

    def _check_references(self, blog_id: str, user_id: str):
        if not crud.find_by_id(self.db, Blog, blog_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
        if not crud.find_by_id(self.db, User, user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    def _page(self, *criteria, page: int, page_size: int) -> schemas.CommentPage:
        comments, total, pages = crud.paginate(self.db, Comment, *criteria, page=page, page_size=page_size)
        return schemas.CommentPage(
            total_count=total,
            page=page,
            page_size=page_size,
            total_pages=pages,
            comments=[schemas.CommentOut.model_validate(c) for c in comments],
        )

    def create_comment(self, data: schemas.CommentCreate):
        self._check_references(data.blog_id, data.user_id)
        comment = crud.insert(self.db, Comment(
            blog_id=data.blog_id,
            user_id=data.user_id,
            content=data.content,
            created_at=utcnow(),
        ))
        logger.info("Created comment %s on blog %s", comment.id, data.blog_id)
        return comment

    def get_comment(self, comment_id: str):
        return self._get_or_404(comment_id)

    def list_comments(self, page: int, page_size: int) -> schemas.CommentPage:
        return self._page(page=page, page_size=page_size)

    def list_blog_comments(self, blog_id: str, page: int, page_size: int) -> schemas.CommentPage:
        return self._page(Comment.blog_id == blog_id, page=page, page_size=page_size)

    def list_user_comments(self, user_id: str, page: int, page_size: int) -> schemas.CommentPage:
        if not crud.find_by_id(self.db, User, user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return self._page(Comment.user_id == user_id, page=page, page_size=page_size)

    def update_comment(self, comment_id: str, data: schemas.CommentCreate):
        comment = self._get_or_404(comment_id)
        self._check_references(data.blog_id, data.user_id)

        # created_at is carried over from the stored record
        comment = crud.replace(
            self.db,
            comment,
            blog_id=data.blog_id,
            user_id=data.user_id,
            content=data.content,
        )
        logger.info("Updated comment %s", comment_id)
        return comment

    def delete_comment(self, comment_id: str):
        if not crud.delete_by_id(self.db, Comment, comment_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
        logger.info("Deleted comment %s", comment_id)
