import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from config import Settings, get_app_settings
from database import get_db
from models import Role, User
from policies import POLICIES

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is reported as 401 below, not 403
bearer_scheme = HTTPBearer(auto_error=False)


class TokenClaims(BaseModel):
    sub: str
    email: str
    role: Role


def create_access_token(user: User, settings: Settings, now: datetime = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    to_encode = {
        "sub": user.id,
        "email": user.email,
        "role": Role(user.role).value,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.access_token_expire_hours),
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify signature and expiry, then parse the claim set.

    Any failure raises a 401 HTTPException; there is no leeway on expiry.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_iat": True, "require_sub": True},
        )
        return TokenClaims(**payload)
    except (JWTError, ValidationError) as exc:
        logger.warning("Rejected access token: %s", exc.__class__.__name__)
        raise credentials_exception()


async def get_current_claims(
    token: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> TokenClaims:
    if token is None or token.scheme.lower() != "bearer":
        raise credentials_exception("Not authenticated")
    return decode_access_token(token.credentials, settings)


async def body_field(request: Request, name: str) -> Optional[str]:
    """Read one field of the already parsed JSON or form body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        value = body.get(name) if isinstance(body, dict) else None
    elif content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        value = (await request.form()).get(name)
    else:
        return None
    return value if isinstance(value, str) else None


def authorize(operation: str):
    """Build the gate dependency for one entry of the policy table."""
    policy = POLICIES[operation]

    async def gate(
        request: Request,
        claims: TokenClaims = Depends(get_current_claims),
        db: Session = Depends(get_db),
    ) -> TokenClaims:
        if claims.role not in policy.roles:
            logger.warning("Role %s denied for %s", claims.role.value, operation)
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")

        if claims.role == Role.ADMIN:
            return claims

        if policy.owner is not None:
            owner_id = policy.owner(db, request.path_params)
            # Unknown resource: let the handler answer 404
            if owner_id is not None and owner_id != claims.sub:
                logger.warning("User %s is not the owner for %s", claims.sub, operation)
                raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Not the owner of this resource")

        if policy.author_field is not None:
            author_id = await body_field(request, policy.author_field)
            if author_id is not None and author_id != claims.sub:
                logger.warning("User %s tried to act as %s for %s", claims.sub, author_id, operation)
                raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Cannot act on behalf of another user")

        return claims

    gate.__name__ = f"authorize_{operation.replace('.', '_')}"
    return gate
