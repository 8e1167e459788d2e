import contextlib
import logging

from database.database import get_session
from database.repository import TalentRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def talent_uow():
    """Per-unit-of-work transaction scope.

    Yields a TalentRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with talent_uow() as repo:
            referral = repo.referrals.get_by_id(referral_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = get_session()
    try:
        repo = TalentRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
