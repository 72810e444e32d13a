# services/auth_service.py
import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from auth import create_access_token
from config import Settings
from crypto_utils import verify_hashed_password
import crud
import schemas

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register_user(self, first_name: str, last_name: str, email: str, password: str):
        db_user = crud.get_user_by_email(self.db, email)
        if db_user:
            raise HTTPException(status_code=400, detail="Email already registered")
        try:
            user = crud.create_user(self.db, first_name, last_name, email, password)
        except IntegrityError:
            # Lost a race with a concurrent registration
            raise HTTPException(status_code=400, detail="Email already registered")
        logger.info("Registered user %s", user.id)
        return user

    def login_user(self, email: str, password: str) -> schemas.Token:
        db_user = crud.get_user_by_email(self.db, email)
        # Same answer for unknown email and wrong password
        if not db_user or not verify_hashed_password(password, db_user.hashed_password):
            logger.warning("Failed login attempt")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        access_token = create_access_token(db_user, self.settings)
        logger.info("User %s logged in", db_user.id)
        return schemas.Token(token=access_token, token_type="bearer")
