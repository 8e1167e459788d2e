from sqlalchemy.orm import Session


class BaseRepository:
    """Repositories share the caller's Session; talent_uow() commits or rolls back."""

    def __init__(self, db: Session):
        self.db = db

    def flush(self) -> None:
        self.db.flush()
