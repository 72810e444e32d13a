# services/blog_service.py
import logging
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from starlette import status

from image_utils import read_image
from media import ImgurClient, MediaDelegateError
from models import Blog, User, utcnow
import crud
import schemas

logger = logging.getLogger(__name__)


class BlogService:
    def __init__(self, db: Session, media: ImgurClient = None):
        self.db = db
        self.media = media

    def _get_or_404(self, blog_id: str) -> Blog:
        blog = crud.find_by_id(self.db, Blog, blog_id)
        if not blog:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blog not found")
        return blog

    def _to_out(self, blog: Blog, names: dict) -> schemas.BlogOut:
        first_name, last_name = names.get(blog.user_id, ("", ""))
        return schemas.BlogOut(
            id=blog.id,
            title=blog.title,
            description=blog.description,
            created_at=blog.created_at,
            image_url=blog.image_url,
            user_id=blog.user_id,
            first_name=first_name or "",
            last_name=last_name or "",
        )

    def _enrich(self, blogs) -> list:
        names = crud.user_names(self.db, {b.user_id for b in blogs})
        return [self._to_out(b, names) for b in blogs]

    def _page(self, blogs, total: int, page: int, page_size: int) -> schemas.BlogPage:
        return schemas.BlogPage(
            total_count=total,
            page=page,
            page_size=page_size,
            total_pages=crud.total_pages(total, page_size),
            blogs=self._enrich(blogs),
        )

    def _upload(self, image_data: bytes, filename: str, mime_type: str):
        try:
            return self.media.upload(image_data, filename, mime_type)
        except MediaDelegateError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Image upload failed: {e}")

    def create_blog(self, title: str, description: str, user_id: str, image: UploadFile) -> schemas.BlogOut:
        if not crud.find_by_id(self.db, User, user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        # Nothing is written if the upload fails
        uploaded = self._upload(*read_image(image))

        blog = crud.insert(self.db, Blog(
            title=title,
            description=description,
            created_at=utcnow(),
            image_url=uploaded.url,
            image_delete_hash=uploaded.delete_hash,
            user_id=user_id,
        ))
        logger.info("Created blog %s for user %s", blog.id, user_id)
        return self._enrich([blog])[0]

    def get_blog(self, blog_id: str) -> schemas.BlogOut:
        return self._enrich([self._get_or_404(blog_id)])[0]

    def list_blogs(self, page: int, page_size: int) -> schemas.BlogPage:
        blogs, total, _ = crud.paginate(self.db, Blog, page=page, page_size=page_size)
        return self._page(blogs, total, page, page_size)

    def list_user_blogs(self, user_id: str, page: int, page_size: int) -> schemas.BlogPage:
        blogs, total, _ = crud.paginate(self.db, Blog, Blog.user_id == user_id, page=page, page_size=page_size)
        if not blogs:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No blogs found for this user")
        return self._page(blogs, total, page, page_size)

    def update_blog(self, blog_id: str, title: Optional[str] = None, description: Optional[str] = None,
                    image: Optional[UploadFile] = None) -> schemas.BlogOut:
        blog = self._get_or_404(blog_id)
        fields = {}

        if image is not None:
            new_image = read_image(image)
            # Old image must be gone before the new one goes up
            try:
                self.media.delete(blog.image_delete_hash)
            except MediaDelegateError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                                    detail=f"Failed to delete existing image: {e}")
            uploaded = self._upload(*new_image)
            fields["image_url"] = uploaded.url
            fields["image_delete_hash"] = uploaded.delete_hash

        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description

        blog = crud.replace(self.db, blog, **fields)
        logger.info("Updated blog %s", blog_id)
        return self._enrich([blog])[0]

    def delete_blog(self, blog_id: str):
        blog = self._get_or_404(blog_id)
        try:
            self.media.delete(blog.image_delete_hash)
        except MediaDelegateError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Failed to delete image: {e}")

        crud.delete_by_id(self.db, Blog, blog_id)
        logger.info("Deleted blog %s", blog_id)

    def search_blogs(self, query: str, page: int, page_size: int) -> schemas.BlogPage:
        """Blogs whose title matches, plus blogs written by users whose name matches.

        TotalCount is the title-match count plus the name-match count, so it
        can be larger than the de-duplicated result set.
        """
        query = (query or "").strip()
        if not query:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query must not be empty")

        # % and _ in the query are literal characters
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        title_match = Blog.title.ilike(pattern, escape="\\")
        name_match = or_(
            User.first_name.ilike(pattern, escape="\\"),
            User.last_name.ilike(pattern, escape="\\"),
            (User.first_name + " " + User.last_name).ilike(pattern, escape="\\"),
        )

        by_title = crud.find_many(self.db, Blog, title_match)
        matched_user_ids = self.db.execute(select(User.id).where(name_match)).scalars().all()
        by_author = crud.find_many(self.db, Blog, Blog.user_id.in_(matched_user_ids)) if matched_user_ids else []

        merged = {}
        for blog in sorted(by_title + by_author, key=lambda b: b.seq):
            merged.setdefault(blog.id, blog)
        start = (page - 1) * page_size
        blogs = list(merged.values())[start:start + page_size]

        total = crud.count(self.db, Blog, title_match) + crud.count(self.db, User, name_match)
        return self._page(blogs, total, page, page_size)
