"""Authorization policy table.

Every protected operation is declared here once: the roles allowed to call
it, optionally a resolver returning the id of the user who owns the target
resource, and optionally the request body field that names the author a
non-admin caller must be. ``auth.authorize`` evaluates these entries;
handlers never re-check roles themselves.
"""
from dataclasses import dataclass
from typing import Callable, FrozenSet, Mapping, Optional

from sqlalchemy.orm import Session

import crud
from models import Blog, Comment, Role

OwnerResolver = Callable[[Session, Mapping[str, str]], Optional[str]]

ANY_ROLE = frozenset({Role.ADMIN, Role.USER})
ADMIN_ONLY = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Policy:
    roles: FrozenSet[Role]
    owner: Optional[OwnerResolver] = None
    author_field: Optional[str] = None


def target_user(db: Session, params: Mapping[str, str]) -> Optional[str]:
    return params.get("user_id")


def blog_owner(db: Session, params: Mapping[str, str]) -> Optional[str]:
    blog = crud.find_by_id(db, Blog, params.get("blog_id"))
    return blog.user_id if blog else None


def comment_author(db: Session, params: Mapping[str, str]) -> Optional[str]:
    comment = crud.find_by_id(db, Comment, params.get("comment_id"))
    return comment.user_id if comment else None


POLICIES = {
    "users.list_all": Policy(ADMIN_ONLY),
    "users.list": Policy(ANY_ROLE),
    "users.get": Policy(ANY_ROLE),
    "users.create": Policy(ADMIN_ONLY),
    "users.update": Policy(ANY_ROLE, owner=target_user),
    "users.delete": Policy(ADMIN_ONLY),
    "users.upload_image": Policy(ANY_ROLE, owner=target_user),
    "users.delete_image": Policy(ANY_ROLE, owner=target_user),

    "blogs.list": Policy(ANY_ROLE),
    "blogs.get": Policy(ANY_ROLE),
    "blogs.by_user": Policy(ANY_ROLE),
    "blogs.search": Policy(ANY_ROLE),
    "blogs.create": Policy(ANY_ROLE, author_field="user_id"),
    "blogs.update": Policy(ANY_ROLE, owner=blog_owner),
    "blogs.delete": Policy(ANY_ROLE, owner=blog_owner),

    "comments.list": Policy(ANY_ROLE),
    "comments.get": Policy(ANY_ROLE),
    "comments.by_blog": Policy(ANY_ROLE),
    "comments.by_user": Policy(ANY_ROLE),
    "comments.create": Policy(ANY_ROLE, author_field="user_id"),
    "comments.update": Policy(ANY_ROLE, owner=comment_author, author_field="user_id"),
    "comments.delete": Policy(ANY_ROLE, owner=comment_author),
}
