# crud.py
"""Store primitives shared by every service.

Each collection is a mapped model; a filter is a list of SQLAlchemy
criteria. Results come back in insertion order.
"""
import math

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models
from crypto_utils import hash_password


def _commit(db: Session):
    # Session stays usable after a unique index violation
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise


def find_one(db: Session, model, *criteria):
    return db.execute(select(model).where(*criteria)).scalars().first()


def find_by_id(db: Session, model, record_id: str):
    return find_one(db, model, model.id == record_id)


def find_many(db: Session, model, *criteria, skip: int = 0, limit: int = None):
    stmt = select(model).where(*criteria).order_by(model.seq).offset(skip)
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def count(db: Session, model, *criteria) -> int:
    return db.execute(select(func.count()).select_from(model).where(*criteria)).scalar_one()


def insert(db: Session, record):
    db.add(record)
    _commit(db)
    db.refresh(record)
    return record


def replace(db: Session, record, **fields):
    """Overwrite the given fields of an existing record and persist it."""
    for name, value in fields.items():
        setattr(record, name, value)
    _commit(db)
    db.refresh(record)
    return record


def delete_by_id(db: Session, model, record_id: str) -> int:
    deleted = db.query(model).filter(model.id == record_id).delete(synchronize_session=False)
    db.commit()
    return deleted


def paginate(db: Session, model, *criteria, page: int, page_size: int):
    """Return (items, total, total_pages) for one page of a filtered listing."""
    total = count(db, model, *criteria)
    items = find_many(db, model, *criteria, skip=(page - 1) * page_size, limit=page_size)
    return items, total, total_pages(total, page_size)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0


def get_user_by_email(db: Session, email: str):
    return find_one(db, models.User, models.User.email == email.strip().lower())


def create_user(db: Session, first_name: str, last_name: str, email: str, password: str,
                role: models.Role = models.Role.USER):
    db_user = models.User(
        first_name=first_name,
        last_name=last_name,
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        role=role,
    )
    return insert(db, db_user)


def user_names(db: Session, user_ids) -> dict:
    """Resolve {user_id: (first_name, last_name)} in a single query."""
    ids = set(user_ids)
    if not ids:
        return {}
    users = db.execute(select(models.User).where(models.User.id.in_(ids))).scalars().all()
    return {u.id: (u.first_name, u.last_name) for u in users}
