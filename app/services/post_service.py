"""
Post Service - job posts and job-finding posts.

Any logged-in account can read posts. Only the owner (same id AND same
account type) can edit or delete one.
"""

import logging
from typing import List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.models import ServiceResult
from app.repositories import PostRepository
from app.schemas.schemas import CreatedPost, PostPage, SessionIdentity

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, repository: PostRepository, response_model: Type[BaseModel], label: str):
        self.repository = repository
        self.response_model = response_model
        self.label = label

    def _not_found(self) -> ServiceResult:
        return ServiceResult.fail(f"{self.label} not found", 404)

    def _not_found_or_denied(self) -> ServiceResult:
        return ServiceResult.fail(f"{self.label} not found or access denied", 404)

    def create(self, owner: SessionIdentity, post: BaseModel) -> ServiceResult[CreatedPost]:
        try:
            post_id = self.repository.create(owner, post.model_dump())
        except SQLAlchemyError:
            logger.exception("Creating %s failed", self.label)
            return ServiceResult.internal_error()
        return ServiceResult.ok(f"Successfully created {self.label.lower()}", CreatedPost(id=post_id), status=201)

    def list(self, page: int, limit: int, search: Optional[str] = None) -> ServiceResult[PostPage]:
        try:
            rows, total = self.repository.list(page, limit, search)
        except SQLAlchemyError:
            logger.exception("Listing %s failed", self.label)
            return ServiceResult.internal_error()
        posts = [self.response_model(**row) for row in rows]
        return ServiceResult.ok(
            f"Successfully retrieve {self.label.lower()}s",
            PostPage(posts=posts, total=total, page=page, limit=limit),
        )

    def list_by_owner(self, owner: SessionIdentity) -> ServiceResult[List[BaseModel]]:
        try:
            rows = self.repository.list_by_owner(owner)
        except SQLAlchemyError:
            logger.exception("Listing own %s failed", self.label)
            return ServiceResult.internal_error()
        return ServiceResult.ok(
            f"Successfully retrieve {self.label.lower()}s",
            [self.response_model(**row) for row in rows],
        )

    def get(self, post_id: str) -> ServiceResult[BaseModel]:
        try:
            row = self.repository.get(post_id)
        except SQLAlchemyError:
            logger.exception("Loading %s %s failed", self.label, post_id)
            return ServiceResult.internal_error()
        if row is None:
            return self._not_found()
        return ServiceResult.ok(f"Successfully retrieve {self.label.lower()}", self.response_model(**row))

    def update(self, owner: SessionIdentity, post_id: str, post: BaseModel) -> ServiceResult[CreatedPost]:
        try:
            updated = self.repository.update(post_id, owner, post.model_dump())
        except SQLAlchemyError:
            logger.exception("Updating %s %s failed", self.label, post_id)
            return ServiceResult.internal_error()
        if not updated:
            return self._not_found_or_denied()
        return ServiceResult.ok(f"Successfully updated {self.label.lower()}", CreatedPost(id=post_id))

    def delete(self, owner: SessionIdentity, post_id: str) -> ServiceResult[CreatedPost]:
        try:
            deleted = self.repository.delete(post_id, owner)
        except SQLAlchemyError:
            logger.exception("Deleting %s %s failed", self.label, post_id)
            return ServiceResult.internal_error()
        if not deleted:
            return self._not_found_or_denied()
        return ServiceResult.ok(f"Successfully deleted {self.label.lower()}", CreatedPost(id=post_id))
