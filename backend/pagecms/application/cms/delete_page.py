from flask import current_app
from pagecms.extensions import db
from pagecms.models.page import Page
from pagecms.utils.transaction import transactional


def delete_page(
    *,
    page_id: str,
) -> None:
    """
    Hard-delete a page; its content document goes with it.
    """

    page = Page.query.filter_by(id=page_id).first_or_404(description="Page not found")

    with transactional():
        db.session.delete(page)

    current_app.logger.info("page.delete id=%s", page_id)
