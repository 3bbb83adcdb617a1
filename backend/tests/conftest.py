import json

import pytest

from pagecms import create_app
from pagecms.extensions import db


class ManualHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.ran = False

    def cancel(self):
        self.cancelled = True

    def run(self):
        self.ran = True
        self.callback()


class ManualScheduler:
    """Records call_later requests; tests fire them explicitly."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback):
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled and not h.ran]

    def run_pending(self):
        for handle in self.pending:
            handle.run()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_page(client):
    def _make(title="Home", slug="home"):
        resp = client.post("/api/v1/pages", json={"title": title, "slug": slug})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]
    return _make


@pytest.fixture
def sample_document():
    """A v2 envelope covering every block type plus an unknown one."""
    return json.dumps({
        "version": "2.0",
        "updatedAt": "2024-05-01T10:00:00+00:00",
        "blocks": [
            {"id": "t1", "type": "text", "content": "<p>Hello</p>", "config": {}, "order": 0, "isActive": True},
            {"id": "i1", "type": "image", "title": "Photo", "config": {"imageUrl": "/uploads/a.jpg", "alt": "A"}, "order": 1, "isActive": True},
            {"id": "v1", "type": "video", "config": {"videoUrl": "https://youtu.be/abc123"}, "order": 2, "isActive": True},
            {"id": "g1", "type": "gallery", "config": {"images": [{"id": "1", "url": "/g/1.jpg"}, {"id": "2", "url": "/g/2.jpg"}]}, "order": 3, "isActive": True},
            {"id": "c1", "type": "cta", "config": {"buttonText": "Go", "buttonUrl": "/go"}, "order": 4, "isActive": True},
            {"id": "q1", "type": "quote", "config": {"quote": "Less is more", "author": "Mies"}, "order": 5, "isActive": True},
            {"id": "l1", "type": "list", "config": {"items": [{"text": "one"}], "listType": "ordered"}, "order": 6, "isActive": True},
            {"id": "d1", "type": "divider", "config": {"style": "dashed"}, "order": 7, "isActive": False},
            {"id": "x1", "type": "carousel", "config": {"slides": [1, 2, 3]}, "order": 8, "isActive": True},
        ],
    })
