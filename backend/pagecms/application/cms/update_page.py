from typing import Any, Dict
from flask import current_app
from sqlalchemy.exc import IntegrityError
from pagecms.models.page import Page
from pagecms.utils.transaction import transactional


ALLOWED_UPDATE_FIELDS = {"title", "slug", "is_active"}


def update_page(
    *,
    page_id: str,
    data: Dict[str, Any],
) -> Page:
    """
    Update page metadata (content has its own overwrite path).

    Design rules:
    - Only whitelisted fields are mutable
    - No silent no-op updates
    """

    page = Page.query.filter_by(id=page_id).first_or_404(description="Page not found")

    changed_fields: list[str] = []

    try:
        with transactional():
            for field in ALLOWED_UPDATE_FIELDS:
                if field in data and getattr(page, field) != data[field]:
                    setattr(page, field, data[field])
                    changed_fields.append(field)

            if not changed_fields:
                # Explicitly fail instead of silently succeeding
                raise ValueError("No valid fields provided for update")

            if not page.title or not page.slug:
                raise ValueError("Title and slug cannot be empty")

    except IntegrityError as exc:
        raise ValueError("A page with this slug already exists") from exc

    current_app.logger.info("page.update id=%s fields=%s", page.id, sorted(changed_fields))
    return page
