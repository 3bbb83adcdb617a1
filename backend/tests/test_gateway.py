"""HTTP page gateway: envelope handling and failure reporting."""
import json
from unittest import mock

import pytest
import requests

from pagecms.errors import PersistenceError
from pagecms.gateway.http import PageGateway
from pagecms.normalizers.content import normalize, prepare_content_data


def response(status=200, body=None, json_error=False):
    resp = mock.Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def gateway(session):
    return PageGateway("https://cms.example.com/api/v1/", session=session, timeout=3)


# ── load ─────────────────────────────────────────────────────────────────────

def test_load_returns_raw_content(gateway, session):
    session.request.return_value = response(body={"success": True, "data": {"id": "p1", "content": "<p>x</p>"}})

    assert gateway.load("p1") == "<p>x</p>"
    session.request.assert_called_once_with("GET", "https://cms.example.com/api/v1/pages/p1", timeout=3)


def test_load_missing_content_is_empty_string(gateway, session):
    session.request.return_value = response(body={"success": True, "data": {"id": "p1", "content": None}})
    assert gateway.load("p1") == ""


@pytest.mark.parametrize("data", [["not", "a", "page"], "page", 42])
def test_load_rejects_non_object_page_payload(gateway, session, data):
    session.request.return_value = response(body={"success": True, "data": data})

    with pytest.raises(PersistenceError):
        gateway.load("p1")


def test_load_without_data_is_empty_string(gateway, session):
    session.request.return_value = response(body={"success": True})
    assert gateway.load("p1") == ""


def test_load_not_found_raises(gateway, session):
    session.request.return_value = response(404, {"success": False, "error": "Page not found"})

    with pytest.raises(PersistenceError) as excinfo:
        gateway.load("nope")
    assert excinfo.value.status_code == 404
    assert "Page not found" in str(excinfo.value)


# ── save ─────────────────────────────────────────────────────────────────────

def test_save_puts_serialized_document(gateway, session):
    session.request.return_value = response(body={"success": True, "data": {"id": "p1"}})
    document = prepare_content_data(normalize('[{"id": "a", "type": "text", "content": "hi"}]').blocks)

    result = gateway.save("p1", document)

    assert result.success is True
    assert result.data == {"id": "p1"}
    method, url = session.request.call_args.args
    assert (method, url) == ("PUT", "https://cms.example.com/api/v1/pages/p1/content")
    sent = json.loads(session.request.call_args.kwargs["json"]["content"])
    assert sent["version"] == "2.0"
    assert sent["updatedAt"]
    assert [b["id"] for b in sent["blocks"]] == ["a"]


def test_save_network_error_is_reported_not_raised(gateway, session):
    session.request.side_effect = requests.ConnectionError("refused")

    result = gateway.save("p1", prepare_content_data([]))

    assert result.success is False
    assert "refused" in result.error


def test_save_server_error_without_json(gateway, session):
    session.request.return_value = response(502, json_error=True)

    result = gateway.save("p1", prepare_content_data([]))

    assert result.success is False
    assert result.error == "HTTP 502"


def test_save_envelope_failure(gateway, session):
    session.request.return_value = response(200, {"success": False, "error": "content must be a string"})

    result = gateway.save("p1", prepare_content_data([]))

    assert (result.success, result.error) == (False, "content must be a string")
