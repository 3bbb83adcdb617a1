from pagecms.extensions import db
from .base import BaseModel

class Page(BaseModel):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    is_active = db.Column(db.Boolean, default=True)

    # Serialized content document (possibly a legacy HTML/plain string).
    # Replaced wholesale on every save; no partial updates.
    content = db.Column(db.Text, nullable=False, default="")
