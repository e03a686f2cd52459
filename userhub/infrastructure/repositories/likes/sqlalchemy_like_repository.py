# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from userhub.domain.likes.entities import Like as DomainLike
from userhub.domain.likes.exceptions import DuplicateLikeError
from userhub.domain.likes.repositories import LikeRepository
from userhub.infrastructure.db.models import Like
from userhub.infrastructure.db.session import session_scope
from userhub.shared.logging import logger


def _to_domain(row: Like) -> DomainLike:
    return DomainLike(
        id=row.id,
        liked_user_id=row.liked_user_id,
        liked_by_user_id=row.liked_by_user_id,
        created_at=row.created_at,
    )


class SqlAlchemyLikeRepository(LikeRepository):
    def exists(self, liked_user_id: str, liked_by_user_id: str) -> bool:
        with session_scope() as session:
            row = (
                session.query(Like.id)
                .filter(
                    Like.liked_user_id == liked_user_id,
                    Like.liked_by_user_id == liked_by_user_id,
                )
                .first()
            )
            return row is not None

    def add(self, liked_user_id: str, liked_by_user_id: str) -> DomainLike:
        try:
            with session_scope() as session:
                row = Like(liked_user_id=liked_user_id, liked_by_user_id=liked_by_user_id)
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError:
            # The unique pair constraint and the foreign keys both raise
            # IntegrityError; only the former means "already liked".
            if self.exists(liked_user_id, liked_by_user_id):
                logger.warning(
                    f"likes.repo: duplicate pair rejected liked_user_id={liked_user_id} "
                    f"liked_by={liked_by_user_id}"
                )
                raise DuplicateLikeError() from None
            raise

    def remove(self, liked_user_id: str, liked_by_user_id: str) -> bool:
        with session_scope() as session:
            deleted = (
                session.query(Like)
                .filter(
                    Like.liked_user_id == liked_user_id,
                    Like.liked_by_user_id == liked_by_user_id,
                )
                .delete(synchronize_session=False)
            )
            return deleted > 0
