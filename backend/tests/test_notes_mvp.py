from datetime import datetime, timedelta, timezone


def _create(client, headers, **body):
    body.setdefault("title", "t1")
    body.setdefault("content", "c1")
    r = client.post("/notes", headers=headers, json=body)
    assert r.status_code == 201
    return r.json()


def test_create_and_list(client, alice):
    note = _create(client, alice, tags=["work"], color="yellow")
    assert note["archived"] is False
    assert note["trashed"] is False
    assert note["trashed_at"] is None
    assert note["created_at"]

    r = client.get("/notes", headers=alice)
    assert r.status_code == 200
    assert [n["id"] for n in r.json()] == [note["id"]]


def test_invalid_note_id_is_rejected(client, alice):
    # malformed identifier is rejected before business logic
    r = client.get("/notes/not-a-uuid", headers=alice)
    assert r.status_code == 422


def test_search_by_query(client, alice):
    hit = _create(client, alice, title="Shopping list", content="eggs")
    _create(client, alice, title="Meeting", content="agenda")

    r = client.get("/notes/search", params={"query": "SHOP"}, headers=alice)
    assert r.status_code == 200
    assert [n["id"] for n in r.json()] == [hit["id"]]

    r = client.get("/notes/search", headers=alice)
    assert len(r.json()) == 2


def test_tag_archive_and_trash_views(client, alice):
    note = _create(client, alice, title="A", content="x", tags=["work"])

    r = client.get("/notes/tag/work", headers=alice)
    assert [n["id"] for n in r.json()] == [note["id"]]

    r = client.put(
        f"/notes/{note['id']}",
        headers=alice,
        json={"title": "A", "content": "x", "tags": ["work"], "archived": True},
    )
    assert r.status_code == 200
    assert r.json()["archived"] is True

    r = client.delete(f"/notes/{note['id']}", headers=alice)
    assert r.status_code == 200
    assert r.json()["trashed"] is True
    assert r.json()["trashed_at"] is not None

    assert client.get("/notes", headers=alice).json() == []
    assert client.get("/notes/tag/work", headers=alice).json() == []
    assert [n["id"] for n in client.get("/notes/archived", headers=alice).json()] == [note["id"]]
    assert [n["id"] for n in client.get("/notes/trashed", headers=alice).json()] == [note["id"]]


def test_update_is_a_full_overwrite(client, alice):
    note = _create(client, alice, tags=["a", "b"], color="red")

    r = client.put(f"/notes/{note['id']}", headers=alice, json={"title": "renamed"})
    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "renamed"
    assert body["content"] is None
    assert body["tags"] == []
    assert body["color"] is None
    assert body["created_at"] == note["created_at"]


def test_restore_from_trash_keeps_trashed_at(client, alice):
    note = _create(client, alice)
    trashed = client.delete(f"/notes/{note['id']}", headers=alice).json()

    r = client.put(f"/notes/{note['id']}", headers=alice, json={"title": "t1", "trashed": False})
    assert r.status_code == 200
    assert r.json()["trashed"] is False
    assert r.json()["trashed_at"] == trashed["trashed_at"]
    assert [n["id"] for n in client.get("/notes", headers=alice).json()] == [note["id"]]


def test_empty_trash(client, alice):
    keep = _create(client, alice, title="keep")
    drop = _create(client, alice, title="drop")
    client.delete(f"/notes/{drop['id']}", headers=alice)

    r = client.delete("/notes/trashed/empty", headers=alice)
    assert r.status_code == 200
    assert r.json() == {"deleted": 1}
    assert client.get("/notes/trashed", headers=alice).json() == []
    assert [n["id"] for n in client.get("/notes", headers=alice).json()] == [keep["id"]]

    r = client.get(f"/notes/{drop['id']}", headers=alice)
    assert r.status_code == 404

    assert client.delete("/notes/trashed/empty", headers=alice).json() == {"deleted": 0}


def test_reminders_only_future(client, alice):
    now = datetime.now(timezone.utc)
    upcoming = _create(client, alice, reminder=(now + timedelta(days=1)).isoformat())
    _create(client, alice, reminder=(now - timedelta(days=1)).isoformat())
    _create(client, alice)

    r = client.get("/notes/reminders", headers=alice)
    assert r.status_code == 200
    assert [n["id"] for n in r.json()] == [upcoming["id"]]


def test_unknown_note_is_not_found(client, alice):
    missing = "00000000-0000-0000-0000-000000000000"
    r = client.put(f"/notes/{missing}", headers=alice, json={"title": "x"})
    assert r.status_code == 404
    assert r.json()["code"] == "RES_NOT_FOUND"
    assert client.delete(f"/notes/{missing}", headers=alice).status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_long_title_and_content_are_accepted(client, alice):
    note = _create(client, alice, title="x" * 201)
    assert len(note["title"]) == 201

    r = client.put(f"/notes/{note['id']}", headers=alice, json={"content": "y" * 50_001})
    assert r.status_code == 200
    assert len(r.json()["content"]) == 50_001


def test_search_query_is_a_pattern(client, alice):
    hit = _create(client, alice, title="abc", content="")
    _create(client, alice, title="xyz", content="")

    r = client.get("/notes/search", params={"query": "a.c"}, headers=alice)
    assert [n["id"] for n in r.json()] == [hit["id"]]

    r = client.get("/notes/search", params={"query": "("}, headers=alice)
    assert r.status_code == 400
    assert r.json()["code"] == "VAL_VALIDATION_ERROR"
