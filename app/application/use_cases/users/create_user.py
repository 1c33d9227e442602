"""Use case for creating users."""

from sqlalchemy.orm import Session

from app.domain.entities import User, UserRole
from app.infrastructure.repositories import RoleRepository, UserRepository
from app.infrastructure.security import get_password_hash
from app.utils import now_in_app_naive_datetime

from .validators import ensure_valid_email


def create_user(
    session: Session,
    *,
    name: str,
    role: UserRole | str,
    email: str,
    password: str,
) -> User:
    """Create a new user ensuring unique email addresses."""

    user_role = role if isinstance(role, UserRole) else UserRole.from_alias(role)
    if user_role is None:
        raise ValueError(f"Unknown role '{role}'")

    normalized_email = ensure_valid_email(email)
    repository = UserRepository(session)
    if repository.get_by_email(normalized_email):
        raise ValueError("Email address is already registered")

    stored_role = RoleRepository(session).ensure(user_role)

    user = User(
        id=None,
        role=stored_role,
        name=name.strip(),
        email=normalized_email,
        password=get_password_hash(password),
        last_login=None,
        created_at=now_in_app_naive_datetime(),
        updated_at=None,
        is_active=True,
    )

    return repository.create(user)
