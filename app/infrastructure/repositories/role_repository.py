"""Persistence layer for roles data."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.entities import Role, UserRole
from app.infrastructure.models import RoleModel


class RoleRepository:
    """Provide access to roles stored in the database."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, role_id: int) -> Role | None:
        model = self.session.query(RoleModel).filter_by(id=role_id).first()
        return self._to_entity(model) if model else None

    def get_by_alias(self, alias: str) -> Role | None:
        model = (
            self.session.query(RoleModel)
            .filter(func.lower(RoleModel.alias) == alias.lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def ensure(self, role: UserRole) -> Role:
        """Return the stored role for ``role``, inserting it when missing."""

        existing = self.get_by_alias(role.alias)
        if existing is not None:
            return existing
        model = RoleModel(name=role.value.title(), alias=role.alias)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: RoleModel) -> Role:
        return Role(id=model.id, name=model.name, alias=model.alias)


__all__ = ["RoleRepository"]
