"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from mb_feedback.core.exceptions import InvalidInputError, ObjectNotFoundError
from mb_feedback.domain.repositories.base import BaseRepository
from mb_feedback.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def _as_dict(obj_in: Any, exclude_unset: bool = False) -> Dict[str, Any]:
    # Pydantic model or plain dict
    if hasattr(obj_in, "model_dump"):
        return obj_in.model_dump(exclude_unset=exclude_unset)
    return dict(obj_in)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models.

    Subclasses translate their filter objects into query criteria by
    implementing ``_apply_get_filters`` and ``_apply_list_filters``.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _apply_get_filters(self, query: Query, params: Any) -> Query:
        raise NotImplementedError

    def _apply_list_filters(self, query: Query, params: Any) -> Query:
        raise NotImplementedError

    def _filtered(self, params: Any) -> Query:
        if not params.is_valid():
            raise InvalidInputError(
                f"{self.model.__name__}: at least one filter is required",
                {"params": params.model_dump(exclude_none=True)},
            )
        return self._apply_get_filters(self.db.query(self.model), params)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def get(self, params: Any) -> Optional[ModelType]:
        return self._filtered(params).order_by(self.model.id).first()

    def list(self, params: Any) -> Tuple[List[ModelType], int]:
        query = self._apply_list_filters(self.db.query(self.model), params)
        items = query.order_by(self.model.id).all()
        return items, len(items)

    def create(self, obj_in: Any) -> ModelType:
        db_obj = self.model(**_as_dict(obj_in))
        self.db.add(db_obj)
        self._commit()
        self.db.refresh(db_obj)
        return db_obj

    def create_batch(self, objs_in: Sequence[Any]) -> None:
        rows = [_as_dict(obj) for obj in objs_in]
        if not rows:
            return
        try:
            self.db.execute(insert(self.model), rows)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()

    def update(self, params: Any, obj_in: Any) -> int:
        query = self._filtered(params)
        update_data = _as_dict(obj_in, exclude_unset=True)
        if not update_data:
            return 0
        try:
            count = query.update(update_data, synchronize_session=False)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return count

    def delete(self, params: Any) -> int:
        query = self._filtered(params)
        try:
            count = query.delete(synchronize_session=False)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return count


def get_required(repo: BaseRepository[ModelType], params: Any) -> ModelType:
    """Get a single entity or raise ObjectNotFoundError."""
    obj = repo.get(params)
    if obj is None:
        raise ObjectNotFoundError(details={"params": params.model_dump(exclude_none=True)})
    return obj
