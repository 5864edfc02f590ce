from typing import Any, Iterable, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_active(self, db: Session, *, id: Any) -> Optional[User]:
        return db.query(User).filter(User.id == id, User.is_active == True).first()

    def get_filtered(
        self,
        db: Session,
        *,
        role: Optional[RoleEnum] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[User]:
        query = db.query(User)
        if role is not None:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                )
            )
        return query.all()

    def get_active_by_role(self, db: Session, *, role: RoleEnum) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == role, User.is_active == True)
            .order_by(User.last_name, User.first_name)
            .all()
        )

    def count_active_by_role(self, db: Session, *, role: RoleEnum) -> int:
        return db.query(User).filter(User.role == role, User.is_active == True).count()

    def get_active_employees_excluding(self, db: Session, *, exclude_ids: Iterable[int]) -> List[User]:
        query = db.query(User).filter(User.role == RoleEnum.EMPLOYEE, User.is_active == True)
        exclude_ids = list(exclude_ids)
        if exclude_ids:
            query = query.filter(User.id.notin_(exclude_ids))
        return query.order_by(User.last_name, User.first_name).all()

    def update_user_active_status(self, db: Session, *, user: User, is_active: bool, commit: bool = True) -> User:
        """Update a user's active status."""
        user.is_active = is_active
        db.add(user)
        db.flush()
        if commit:
            db.commit()
        db.refresh(user)
        return user


user = CRUDUser(User)
