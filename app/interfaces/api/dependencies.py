"""FastAPI dependency utilities."""

from hashlib import sha256

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.use_cases.circulars import (
    LookupPolicy,
    RecipientResolver,
    UserDirectory,
)
from app.config import get_settings
from app.domain.entities import User, UserRole
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.directory import SqlUserDirectory
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

_INVALID_CREDENTIALS = "Invalid credentials"


def password_signature(user: User) -> str:
    """Return the token claim that ties a token to the current password."""

    return sha256(f"{user.password}:{int(user.is_active)}".encode()).hexdigest()


def _unauthorized(detail: str = _INVALID_CREDENTIALS) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    email = payload.get("sub")
    signature_claim = payload.get("pwd_sig")
    if not isinstance(email, str) or not isinstance(signature_claim, str):
        raise _unauthorized()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _unauthorized("User not found")

    if signature_claim != password_signature(user):
        raise _unauthorized()

    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_management(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user belongs to management."""

    if not current_user.has_role(UserRole.MANAGEMENT):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return current_user


def get_user_directory() -> UserDirectory:
    """Return the directory used to expand recipient groups."""

    return SqlUserDirectory(SessionLocal)


def get_recipient_resolver(
    directory: UserDirectory = Depends(get_user_directory),
) -> RecipientResolver:
    """Return a resolver configured with the directory lookup policy."""

    return RecipientResolver(directory, LookupPolicy.from_settings(get_settings()))
