from typing import Any, Dict
from flask import current_app
from sqlalchemy.exc import IntegrityError
from pagecms.extensions import db
from pagecms.models.page import Page
from pagecms.utils.transaction import transactional


def create_page(
    *,
    data: Dict[str, Any],
) -> Page:
    """
    Create a new page with an empty content document.

    Edge cases handled:
    - Missing required fields
    - Duplicate slug
    """

    title: str | None = data.get("title")
    slug: str | None = data.get("slug")

    if not title or not slug:
        raise ValueError("Both title and slug are required")

    page = Page()
    page.title = title
    page.slug = slug
    page.is_active = bool(data.get("is_active", True))
    # Content is created empty; the first save writes the document
    page.content = ""
    try:
        with transactional():
            db.session.add(page)
            db.session.flush()  # ensures page.id is available

        current_app.logger.info("page.create id=%s slug=%s", page.id, page.slug)
        return page

    except IntegrityError as exc:
        # Unique constraint on slug
        raise ValueError("A page with this slug already exists") from exc
