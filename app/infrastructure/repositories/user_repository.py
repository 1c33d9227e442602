"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from app.domain.entities import Role, User
from app.infrastructure.models import RoleModel, UserModel


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email)
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        if model.role is None:
            self.session.refresh(model, attribute_names=["role"])
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self._get_model(id=user.id)
        if not model:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_ids_by_role_alias(self, alias: str) -> list[int]:
        """Return the ids of active users whose role alias matches ``alias``."""

        query = (
            self.session.query(UserModel.id)
            .join(RoleModel, UserModel.role_id == RoleModel.id)
            .filter(UserModel.is_active.is_(True))
            .filter(RoleModel.alias.ilike(alias))
        )
        return [user_id for (user_id,) in query.all()]

    def get_name(self, user_id: int) -> str | None:
        name = (
            self.session.query(UserModel.name)
            .filter(UserModel.id == user_id)
            .scalar()
        )
        return name

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            role=UserRepository._role_to_entity(model.role),
            name=model.name,
            email=model.email,
            password=model.password,
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at,
            is_active=model.is_active,
        )

    def _get_model(self, **filters) -> UserModel | None:
        query = self.session.query(UserModel).options(joinedload(UserModel.role))
        return query.filter_by(**filters).first()

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.role_id = user.role.id
        model.name = user.name
        model.email = user.email
        model.password = user.password
        model.last_login = user.last_login
        model.is_active = user.is_active
        if user.created_at is not None:
            model.created_at = user.created_at

    @staticmethod
    def _role_to_entity(model_role) -> Role:
        if model_role is None:
            msg = "User role is not set"
            raise ValueError(msg)
        return Role(id=model_role.id, name=model_role.name, alias=model_role.alias)


__all__ = ["UserRepository"]
