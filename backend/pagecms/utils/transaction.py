from contextlib import contextmanager
from pagecms.extensions import db

@contextmanager
def transactional():
    """Commits on success, rolls back and re-raises on any error."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
