import json

import pyperclip
import pytest
from fastapi.testclient import TestClient

import main
from map_clipboard import clipboard


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(main, "LOCAL_STORAGE_DIR", tmp_path / "storage")
    main._session_cache.clear()
    yield TestClient(main.app)
    main._session_cache.clear()


def upload(client, form):
    return client.post(
        "/api/maps/upload",
        files={"file": ("form.json", json.dumps(form).encode("utf-8"), "application/json")},
    )


def test_upload_returns_initial_view(client, sample_form):
    resp = upload(client, sample_form)

    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Contact"
    assert data["text"].startswith("CONDITIONAL LOGIC MAP: Contact\n\nField 1 [Radio Buttons] Call me?\n")
    assert "[UNUSED-START]" not in data["text"]
    assert not any(data["flags"].values())


def test_upload_invalid_form(client):
    resp = client.post("/api/maps/upload", files={"file": ("form.json", b"{}", "application/json")})
    assert resp.status_code == 400


def test_upload_non_utf8_form(client):
    resp = client.post(
        "/api/maps/upload",
        files={"file": ("form.json", b'{"fields": [] \xff}', "application/json")},
    )
    assert resp.status_code == 400


def test_get_map_with_query_toggles(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map, "name": "Contact"}).json()["id"]

    resp = client.get(f"/api/maps/{map_id}", params={"hide_unused": "true", "hide_field_type": "true"})

    assert resp.status_code == 200
    data = resp.json()
    assert "Comments" not in data["text"]
    assert "[Radio Buttons]" not in data["text"]
    assert data["flags"]["hide_unused"] is True
    assert data["flags"]["hide_used_by"] is False


def test_filter_endpoint_ignores_missing_and_unknown_toggles(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map}).json()["id"]

    resp = client.post(f"/api/maps/{map_id}/filter", json={"hide_used_by": True, "hide_colour": True})

    assert resp.status_code == 200
    assert "IS USED BY" not in resp.json()["text"]
    assert "╚═[1]═>" in resp.json()["text"]


def test_filter_endpoint_reads_control_strings(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map}).json()["id"]

    resp = client.post(f"/api/maps/{map_id}/filter", json={"hide_used_by": "true", "hide_depends_on": "false"})

    assert resp.status_code == 200
    data = resp.json()
    assert "IS USED BY" not in data["text"]
    assert "╚═[1]═>" in data["text"]
    assert data["flags"]["hide_used_by"] is True
    assert data["flags"]["hide_depends_on"] is False


def test_filter_endpoint_rejects_unreadable_control(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map}).json()["id"]
    resp = client.post(f"/api/maps/{map_id}/filter", json={"hide_unused": "maybe"})
    assert resp.status_code == 422


def test_malformed_metadata_is_ignored(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map, "name": "Broken"}).json()["id"]
    (main.LOCAL_STORAGE_DIR / map_id / main.METADATA_FILENAME).write_text("[]", encoding="utf-8")
    main._session_cache.clear()

    resp = client.get(f"/api/maps/{map_id}")
    assert resp.status_code == 200
    assert resp.json()["name"] is None

    listing = client.get("/api/maps")
    assert listing.status_code == 200
    assert listing.json()["items"] == []


def test_session_reloaded_from_storage(client, sample_map):
    map_id = client.post("/api/maps", json={"annotated_text": sample_map, "name": "Stored"}).json()["id"]
    main._session_cache.clear()

    data = client.get(f"/api/maps/{map_id}").json()
    assert data["name"] == "Stored"
    assert data["text"] == main.MapSession(sample_map).initial_view()


def test_list_and_delete(client, sample_map, sample_form):
    first = client.post("/api/maps", json={"annotated_text": sample_map, "name": "One"}).json()["id"]
    upload(client, sample_form)

    items = client.get("/api/maps").json()["items"]
    assert len(items) == 2
    assert {item["source"] for item in items} == {"text", "form.json"}

    assert client.delete(f"/api/maps/{first}").status_code == 200
    assert client.get(f"/api/maps/{first}").status_code == 404
    assert len(client.get("/api/maps").json()["items"]) == 1


@pytest.mark.parametrize("map_id", ["does-not-exist", "..", "00000000-0000-0000-0000-000000000000"])
def test_unknown_map(client, map_id):
    assert client.get(f"/api/maps/{map_id}").status_code == 404
    assert client.delete(f"/api/maps/{map_id}").status_code == 404


def test_copy_endpoint_success(client, sample_map, monkeypatch):
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)
    map_id = client.post("/api/maps", json={"annotated_text": sample_map}).json()["id"]

    resp = client.post(f"/api/maps/{map_id}/copy", json={"flags": {"hide_unused": True}})

    assert resp.status_code == 200
    assert resp.json() == {
        "type": "success",
        "message": "Copied to clipboard!",
        "duration_ms": 3000,
        "fade_ms": 300,
    }
    assert copied == [main.MapSession(sample_map).render(main.ToggleFlags(hide_unused=True))]


def test_copy_endpoint_failure(client, sample_map, monkeypatch):
    def no_clipboard(text):
        raise pyperclip.PyperclipException("no clipboard")

    monkeypatch.setattr(pyperclip, "copy", no_clipboard)
    monkeypatch.setattr(clipboard, "_copy_command", lambda: None)
    map_id = client.post("/api/maps", json={"annotated_text": sample_map}).json()["id"]

    resp = client.post(f"/api/maps/{map_id}/copy", json={"text": "displayed text"})

    assert resp.status_code == 200
    assert resp.json()["type"] == "error"


def test_health(client):
    assert client.get("/api/health").json() == {"status": "Backend API is running"}
