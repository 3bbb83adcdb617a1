# pagecms/normalizers/page.py

def _isoformat(value):
    return value.isoformat() if value else None


def normalize_page(page, include_content=True):
    data = {
        "id": page.id,
        "title": page.title,
        "slug": page.slug,
        "is_active": page.is_active,
        "created_at": _isoformat(page.created_at),
        "updated_at": _isoformat(page.updated_at),
    }
    if include_content:
        # Raw stored string; clients run it through the normalizer
        data["content"] = page.content or ""
    return data
