"""SQLAlchemy model for user roles."""

from sqlalchemy import Column, Integer, String

from app.infrastructure.database import Base


class RoleModel(Base):
    """Role held by a user; ``alias`` is the lowercase ``UserRole`` value."""

    __tablename__ = "role"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, unique=True)
    alias = Column(String(20), nullable=False, unique=True, index=True)


__all__ = ["RoleModel"]
