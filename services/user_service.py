# services/user_service.py
import logging

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette import status

from crypto_utils import hash_password
from image_utils import read_image
from media import ImgurClient, MediaDelegateError
from models import Role, User
import crud
import schemas

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, media: ImgurClient = None):
        self.db = db
        self.media = media

    def _get_or_404(self, user_id: str) -> User:
        user = crud.find_by_id(self.db, User, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    def _ensure_email_free(self, email: str, user_id: str = None):
        existing = crud.get_user_by_email(self.db, email)
        if existing and existing.id != user_id:
            raise self._email_taken()

    @staticmethod
    def _email_taken():
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    def list_users(self, page: int, page_size: int) -> schemas.UserPage:
        users, total, pages = crud.paginate(self.db, User, page=page, page_size=page_size)
        return schemas.UserPage(
            total_items=total,
            page=page,
            page_size=page_size,
            total_pages=pages,
            items=[schemas.UserOut.model_validate(u) for u in users],
        )

    def list_all_users(self):
        return crud.find_many(self.db, User)

    def get_user(self, user_id: str):
        return self._get_or_404(user_id)

    def create_user(self, data: schemas.AdminUserCreate):
        self._ensure_email_free(data.email)
        try:
            user = crud.create_user(self.db, data.first_name, data.last_name, data.email, data.password, data.role)
        except IntegrityError:
            raise self._email_taken()
        logger.info("Created user %s with role %s", user.id, user.role.value)
        return user

    def update_user(self, user_id: str, data: schemas.UserUpdate, caller_role: Role = Role.USER):
        user = self._get_or_404(user_id)
        if data.role != user.role and caller_role != Role.ADMIN:
            logger.warning("Role change for user %s refused", user_id)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only an administrator can change roles")
        self._ensure_email_free(data.email, user_id)

        fields = {
            "first_name": data.first_name,
            "last_name": data.last_name,
            "email": data.email.strip().lower(),
            "role": data.role,
        }
        if data.password:
            fields["hashed_password"] = hash_password(data.password)

        try:
            user = crud.replace(self.db, user, **fields)
        except IntegrityError:
            raise self._email_taken()
        logger.info("Updated user %s", user_id)
        return user

    def delete_user(self, user_id: str):
        # Blogs and comments written by the user are left in place
        if not crud.delete_by_id(self.db, User, user_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        logger.info("Deleted user %s", user_id)

    def upload_image(self, user_id: str, file: UploadFile):
        user = self._get_or_404(user_id)
        image_data, filename, mime_type = read_image(file)

        try:
            image = self.media.upload(image_data, filename, mime_type)
        except MediaDelegateError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Image upload failed: {e}")

        # The previous remote image, if any, is not deleted
        user = crud.replace(self.db, user, image_url=image.url, image_delete_hash=image.delete_hash)
        logger.info("Set profile image for user %s", user_id)
        return user

    def delete_image(self, user_id: str):
        user = self._get_or_404(user_id)
        if not user.image_delete_hash:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image to delete")

        try:
            self.media.delete(user.image_delete_hash)
        except MediaDelegateError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Failed to delete image: {e}")

        user = crud.replace(self.db, user, image_url=None, image_delete_hash=None)
        logger.info("Removed profile image for user %s", user_id)
        return user
