# pagecms/api/v1/pages.py
from flask import current_app, request, jsonify
from pagecms.application.cms.create_page import create_page as create_page_uc
from pagecms.application.cms.delete_page import delete_page as delete_page_uc
from pagecms.application.cms.save_content import save_page_content
from pagecms.application.cms.update_page import update_page as update_page_uc
from pagecms.domain.defaults import block_catalog
from pagecms.models.page import Page
from pagecms.normalizers.content import normalize_content
from pagecms.normalizers.page import normalize_page
from pagecms.normalizers.pagination import normalize_pagination
from pagecms.rendering.engine import join_blocks, render
from pagecms.utils.i18n import available_locales
from . import v1_bp # import the versioned blueprint

MAX_PER_PAGE = 100


def _ok(data, status=200):
    return jsonify({"success": True, "data": data}), status


def _fail(error, status=400):
    return jsonify({"success": False, "error": error}), status


def _locale():
    requested = request.args.get("locale")
    if requested in available_locales():
        return requested
    return current_app.config.get("CONTENT_LOCALE", "en")


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
def create_page():
    data = request.get_json(silent=True) or {}

    if not data.get("title") or not data.get("slug"):
        return _fail("Title and slug are required")

    if Page.query.filter_by(slug=data["slug"]).first():
        return _fail("Slug already exists", 409)

    try:
        page = create_page_uc(data=data)
    except ValueError as exc:
        return _fail(str(exc))

    return _ok(normalize_page(page), 201)


@v1_bp.route("/pages", methods=["GET"])
def list_pages():
    page_num = max(request.args.get("page", 1, type=int), 1)
    per_page = min(max(request.args.get("per_page", 10, type=int), 1), MAX_PER_PAGE)

    pagination = (
        Page.query
        .order_by(Page.created_at.desc())
        .paginate(page=page_num, per_page=per_page, error_out=False)
    )

    return _ok(
        normalize_pagination(
            pagination.items,
            lambda p: normalize_page(p, include_content=False),
            page=page_num,
            per_page=per_page,
            total=pagination.total,
        )
    )


@v1_bp.route("/pages/<page_id>", methods=["GET"])
def get_page(page_id):
    page = Page.query.filter_by(id=page_id).first_or_404(description="Page not found")
    return _ok(normalize_page(page))


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
def update_page(page_id):
    data = request.get_json(silent=True) or {}

    # Slug collision check
    if "slug" in data:
        exists = Page.query.filter(Page.slug == data["slug"], Page.id != page_id).first()
        if exists:
            return _fail("Slug already exists", 409)

    try:
        page = update_page_uc(page_id=page_id, data=data)
    except ValueError as exc:
        return _fail(str(exc))

    return _ok(normalize_page(page))


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
def delete_page(page_id):
    delete_page_uc(page_id=page_id)
    return _ok({"id": page_id})


# ------------------------
# Content document
# ------------------------

@v1_bp.route("/pages/<page_id>/content", methods=["PUT"])
def save_content(page_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "content" not in data:
        return _fail("Request body must be {\"content\": <serialized document>}")

    try:
        page = save_page_content(page_id=page_id, content=data["content"])
    except ValueError as exc:
        return _fail(str(exc))

    return _ok({"id": page.id, "updated_at": page.updated_at.isoformat() if page.updated_at else None})


@v1_bp.route("/pages/<page_id>/render", methods=["GET"])
def render_page(page_id):
    page = Page.query.filter_by(id=page_id).first_or_404(description="Page not found")
    locale = _locale()

    document = normalize_content(page.content, locale)
    rendered = render(document, current_app.config.get("MEDIA_ORIGIN", ""), locale)

    return _ok({
        "id": page.id,
        "html": str(join_blocks(rendered)),
        "blocks": [block.to_dict() for block in rendered],
    })


@v1_bp.route("/blocks/types", methods=["GET"])
def block_types():
    return _ok(block_catalog(_locale()))
