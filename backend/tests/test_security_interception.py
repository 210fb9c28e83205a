"""
Cross-user isolation over HTTP.

A note owned by one user must be invisible to every other user: reads
return nothing, writes answer 404 exactly like a note that never existed.
"""
import time

from jose import jwt


def _create_private_note(client, headers):
    r = client.post(
        "/notes",
        headers=headers,
        json={"title": "Private Note", "content": "Secret content", "tags": ["work"]},
    )
    assert r.status_code == 201
    return r.json()["id"]


def test_unauthorized_note_access(client, alice, bob):
    note_id = _create_private_note(client, bob)

    response = client.get(f"/notes/{note_id}", headers=alice)
    assert response.status_code == 404


def test_lists_never_leak_other_users_notes(client, alice, bob):
    note_id = _create_private_note(client, bob)
    client.put(
        f"/notes/{note_id}",
        headers=bob,
        json={"title": "Private Note", "content": "Secret content", "tags": ["work"], "archived": True},
    )

    for path in ("/notes", "/notes/search?query=secret", "/notes/tag/work", "/notes/archived"):
        r = client.get(path, headers=alice)
        assert r.status_code == 200, path
        assert r.json() == [], path

    client.delete(f"/notes/{note_id}", headers=bob)
    assert client.get("/notes/trashed", headers=alice).json() == []


def test_unauthorized_note_modification(client, alice, bob):
    note_id = _create_private_note(client, bob)

    response = client.put(f"/notes/{note_id}", headers=alice, json={"title": "Hacked"})
    assert response.status_code == 404

    r = client.get(f"/notes/{note_id}", headers=bob)
    assert r.json()["title"] == "Private Note"


def test_unauthorized_note_trash_and_empty(client, alice, bob):
    note_id = _create_private_note(client, bob)

    assert client.delete(f"/notes/{note_id}", headers=alice).status_code == 404

    client.delete(f"/notes/{note_id}", headers=bob)
    r = client.delete("/notes/trashed/empty", headers=alice)
    assert r.json() == {"deleted": 0}
    assert [n["id"] for n in client.get("/notes/trashed", headers=bob).json()] == [note_id]


def test_foreign_and_missing_notes_answer_identically(client, alice, bob):
    note_id = _create_private_note(client, bob)
    missing = "00000000-0000-0000-0000-000000000000"

    foreign = client.put(f"/notes/{note_id}", headers=alice, json={"title": "x"})
    absent = client.put(f"/notes/{missing}", headers=alice, json={"title": "x"})
    assert foreign.status_code == absent.status_code == 404
    assert foreign.json() == absent.json()


def test_token_signed_with_foreign_key_is_rejected(client, alice):
    forged = jwt.encode(
        {"sub": "someone-else", "exp": int(time.time()) + 600},
        "not-the-server-secret",
        algorithm="HS256",
    )

    r = client.get("/notes", headers={"Authorization": f"Bearer {forged}"})
    assert r.status_code == 401
