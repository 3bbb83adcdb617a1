from typing import Any
from flask import current_app
from pagecms.models.page import Page
from pagecms.normalizers.content import normalize_content
from pagecms.utils.transaction import transactional


def save_page_content(
    *,
    page_id: str,
    content: Any,
) -> Page:
    """
    Overwrite the stored content string of a page.

    Design rules:
    - The whole document is replaced; no partial save
    - No version check: concurrent saves resolve last-write-wins
    - The string is stored as sent; normalization happens on read
    """

    if not isinstance(content, str):
        raise ValueError("content must be a string")

    page = Page.query.filter_by(id=page_id).first_or_404(description="Page not found")

    with transactional():
        page.content = content

    current_app.logger.info(
        "page.content.save id=%s blocks=%d bytes=%d",
        page.id,
        len(normalize_content(content).blocks),
        len(content),
    )
    return page
