from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
from app.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Shared persistence helpers.

    Every write flushes, so generated ids and server defaults are visible to
    the caller straight away, and commits only when ``commit`` is true.
    Services running on the transactional session pass ``commit=False`` and
    the dependency commits once the whole request has succeeded.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    @staticmethod
    def _finish(db: Session, commit: bool) -> None:
        db.flush()
        if commit:
            db.commit()

    @staticmethod
    def _as_dict(obj_in: Union[BaseModel, Dict[str, Any]], **dump_kwargs) -> Dict[str, Any]:
        return obj_in if isinstance(obj_in, dict) else obj_in.model_dump(**dump_kwargs)

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.get(self.model, id)

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        db_obj = self.model(**self._as_dict(obj_in))
        db.add(db_obj)
        self._finish(db, commit)
        db.refresh(db_obj)
        return db_obj

    def create_many(self, db: Session, *, objs_in: List[Dict[str, Any]], commit: bool = True) -> List[ModelType]:
        db_objs = [self.model(**data) for data in objs_in]
        db.add_all(db_objs)
        self._finish(db, commit)
        return db_objs

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        # Unknown keys are ignored rather than set as stray attributes.
        for field, value in self._as_dict(obj_in, exclude_unset=True).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        self._finish(db, commit)
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: Any, commit: bool = True) -> Optional[ModelType]:
        obj = db.get(self.model, id)
        if obj is None:
            return None
        db.delete(obj)
        self._finish(db, commit)
        return obj
