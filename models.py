import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text

from database import Base

SCHEMA_VERSION = 1


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    __tablename__ = "users"

    # Insertion sequence, used for listing order
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role, native_enum=False), nullable=False, default=Role.USER)

    # Profile image, set and cleared as a pair
    image_url = Column(String, nullable=True)
    image_delete_hash = Column(String, nullable=True)

    schema_version = Column(Integer, nullable=False, default=SCHEMA_VERSION)


class Blog(Base):
    __tablename__ = "blogs"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    image_url = Column(String, nullable=False)
    image_delete_hash = Column(String, nullable=False)

    # Not a foreign key: existence is checked on write only
    user_id = Column(String(32), index=True, nullable=False)

    schema_version = Column(Integer, nullable=False, default=SCHEMA_VERSION)


class Comment(Base):
    __tablename__ = "comments"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, index=True, nullable=False, default=new_id)
    blog_id = Column(String(32), index=True, nullable=False)
    user_id = Column(String(32), index=True, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    schema_version = Column(Integer, nullable=False, default=SCHEMA_VERSION)
