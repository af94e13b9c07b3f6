# tests/test_messages_api.py
# Guest messages: create, paginated listing, lookup, edit and delete.

import pytest


@pytest.fixture
def post_message(client):
    def _post(invitation_id, text):
        response = client.post("/api/messages", json={"invitation_id": invitation_id, "message": text})
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _post


def test_create_message(client, make_invitation):
    inv = make_invitation()

    response = client.post("/api/messages", json={"invitation_id": inv["id"], "message": "  Selamat!  "})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Pesan berhasil dikirim."
    assert body["invitation_id"] == inv["id"]
    assert client.get(f"/api/messages/{body['id']}").json()["message"] == "Selamat!"


@pytest.mark.parametrize(
    "payload",
    [{"message": "Halo"}, {"invitation_id": 1}, {"invitation_id": 1, "message": "   "}],
)
def test_create_requires_both_fields(client, payload):
    response = client.post("/api/messages", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "invitation_id dan message wajib diisi."


def test_create_for_unknown_invitation(client):
    response = client.post("/api/messages", json={"invitation_id": 42, "message": "Halo"})

    assert response.status_code == 404
    assert response.json() == {"error": "Undangan tidak ditemukan."}


def test_list_is_paginated_newest_first(client, make_invitation, post_message):
    inv = make_invitation()
    ids = [post_message(inv["id"], f"Pesan {i}") for i in range(3)]

    first_page = client.get("/api/messages", params={"limit": 2}).json()
    second_page = client.get("/api/messages", params={"limit": 2, "page": 2}).json()

    assert first_page["total"] == 3
    assert first_page["page"] == 1
    assert first_page["limit"] == 2
    assert [m["id"] for m in first_page["data"]] == [ids[2], ids[1]]
    assert [m["id"] for m in second_page["data"]] == [ids[0]]
    assert "invitations" not in first_page


def test_list_items_carry_guest_fields(client, make_invitation, post_message):
    inv = make_invitation(name="Rudi")
    post_message(inv["id"], "Sukses selalu")

    item = client.get("/api/messages").json()["data"][0]
    assert item["guest_name"] == "Rudi"
    assert item["rsvp_status"] == "Belum Konfirmasi"
    assert item["attendance_status"] == "Belum Check-in"
    assert item["checked_in"] is False

    client.patch(f"/api/invitations/checkin/{inv['slug']}")
    item = client.get("/api/messages").json()["data"][0]
    assert item["attendance_status"] == "Sudah Check-in"
    assert item["checked_in_at"] is not None


def test_list_filters(client, make_invitation, post_message):
    rudi = make_invitation(name="Rudi", phone="0811-222")
    wati = make_invitation(name="Wati")
    post_message(rudi["id"], "Semoga bahagia")
    post_message(wati["id"], "Barakallah")

    def texts(**params):
        return [m["message"] for m in client.get("/api/messages", params=params).json()["data"]]

    assert texts(invitation_id=wati["id"]) == ["Barakallah"]
    assert texts(search="bahagia") == ["Semoga bahagia"]
    assert texts(search="wati") == ["Barakallah"]
    assert texts(search="0811-222") == ["Semoga bahagia"]
    assert texts(search=rudi["slug"]) == ["Semoga bahagia"]


def test_list_can_include_invitations(client, make_invitation, post_message):
    inv = make_invitation()
    post_message(inv["id"], "Halo")

    body = client.get("/api/messages", params={"include_inv": "true"}).json()

    assert body["invitations"] == {
        str(inv["id"]): {
            "id": inv["id"],
            "name": "Budi Santoso",
            "slug": inv["slug"],
            "phone": None,
            "rsvp_status": "Belum Konfirmasi",
            "checked_in": False,
        }
    }


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"limit": 101}])
def test_list_rejects_bad_paging(client, params):
    assert client.get("/api/messages", params=params).status_code == 400


def test_messages_of_one_invitation(client, make_invitation, post_message):
    inv = make_invitation(name="Rudi")
    other = make_invitation(name="Wati")
    post_message(inv["id"], "Satu")
    post_message(other["id"], "Lain")
    post_message(inv["id"], "Dua")

    body = client.get(f"/api/messages/invitation/{inv['id']}").json()

    assert body["invitation"] == {"id": inv["id"], "name": "Rudi"}
    assert [m["message"] for m in body["data"]] == ["Dua", "Satu"]


def test_messages_of_unknown_invitation(client):
    assert client.get("/api/messages/invitation/99").status_code == 404


def test_edit_message(client, make_invitation, post_message):
    message_id = post_message(make_invitation()["id"], "Typo")

    response = client.patch(f"/api/messages/{message_id}", json={"message": "Diperbaiki"})

    assert response.status_code == 200
    assert response.json()["message"] == "Diperbaiki"
    assert response.json()["guest_name"] == "Budi Santoso"


def test_edit_requires_text(client, make_invitation, post_message):
    message_id = post_message(make_invitation()["id"], "Halo")

    response = client.patch(f"/api/messages/{message_id}", json={"message": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Field message wajib diisi.", "field": "message"}


def test_edit_unknown_message(client):
    response = client.patch("/api/messages/99", json={"message": "Halo"})

    assert response.status_code == 404
    assert response.json() == {"error": "Pesan tidak ditemukan."}


def test_delete_message(client, make_invitation, post_message):
    message_id = post_message(make_invitation()["id"], "Hapus saya")

    response = client.delete(f"/api/messages/{message_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Pesan berhasil dihapus."}
    assert client.get(f"/api/messages/{message_id}").status_code == 404
    assert client.delete(f"/api/messages/{message_id}").status_code == 404
