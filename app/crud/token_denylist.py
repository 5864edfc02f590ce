from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.token_denylist import TokenDenylist
from app.schemas.token_denylist import TokenDenylistCreate


class CRUDTokenDenylist(CRUDBase[TokenDenylist, TokenDenylistCreate, TokenDenylistCreate]):
    def is_revoked(self, db: Session, *, jti: Optional[str]) -> bool:
        if not jti:
            return False
        return db.query(self.model.id).filter(self.model.jti == jti).first() is not None

    def purge_expired(self, db: Session, *, now: datetime, commit: bool = True) -> int:
        """Drop entries whose token could no longer be used anyway."""
        purged = db.query(self.model).filter(self.model.exp < now).delete(synchronize_session=False)
        db.flush()
        if commit:
            db.commit()
        return purged


token_denylist = CRUDTokenDenylist(TokenDenylist)
