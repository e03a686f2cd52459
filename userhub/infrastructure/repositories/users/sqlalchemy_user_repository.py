# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError

from userhub.domain.users.entities import NewUser
from userhub.domain.users.entities import User as DomainUser
from userhub.domain.users.exceptions import UserAlreadyExistsError
from userhub.domain.users.repositories import UserRepository
from userhub.infrastructure.db.models import User
from userhub.infrastructure.db.session import session_scope
from userhub.shared.logging import logger


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        full_name=row.full_name,
        password_hash=row.password_hash,
        avatar=row.avatar,
        refresh_token=row.refresh_token,
        project_name=row.project_name,
        project_url=row.project_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def find_by_id(self, user_id: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_username(self, username: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_domain(row) if row else None

    def find_by_username_or_email(
        self, username: str | None, email: str | None
    ) -> DomainUser | None:
        clauses = []
        if username:
            clauses.append(User.username == username)
        if email:
            clauses.append(User.email == email)
        if not clauses:
            return None
        with session_scope() as session:
            row = session.query(User).filter(or_(*clauses)).first()
            return _to_domain(row) if row else None

    def add(self, user: NewUser) -> DomainUser:
        try:
            with session_scope() as session:
                row = User(
                    username=user.username,
                    email=user.email,
                    full_name=user.full_name,
                    password_hash=user.password_hash,
                    avatar=user.avatar,
                    project_name=user.project_name,
                    project_url=user.project_url,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                logger.debug(f"users.repo: inserted user_id={row.id}")
                return _to_domain(row)
        except IntegrityError:
            # Lost a race against a concurrent registration.
            raise UserAlreadyExistsError() from None

    def store_refresh_token(self, user_id: str, token: str) -> bool:
        return self._update(user_id, refresh_token=token)

    def swap_refresh_token(self, user_id: str, expected: str, token: str) -> bool:
        with session_scope() as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id, User.refresh_token == expected)
                .values(refresh_token=token)
            )
            return result.rowcount == 1

    def clear_refresh_token(self, user_id: str) -> bool:
        return self._update(user_id, refresh_token=None)

    def update_password_hash(self, user_id: str, password_hash: str) -> bool:
        return self._update(user_id, password_hash=password_hash)

    def update_avatar(self, user_id: str, avatar: str) -> DomainUser | None:
        with session_scope() as session:
            row = session.get(User, user_id)
            if not row:
                return None
            row.avatar = avatar
            session.flush()
            session.refresh(row)
            return _to_domain(row)

    def _update(self, user_id: str, **values: object) -> bool:
        with session_scope() as session:
            result = session.execute(update(User).where(User.id == user_id).values(**values))
            return result.rowcount == 1
