from datetime import datetime, timezone
import uuid
from pagecms.extensions import db


def utc_now():
    return datetime.now(timezone.utc)


def new_uuid():
    return str(uuid.uuid4())


class BaseModel(db.Model):
    """String uuid primary key plus tz-aware creation/modification stamps."""
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return f"<{type(self).__name__} {self.id}>"
