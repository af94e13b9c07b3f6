# tests/test_catalog_api.py
# Categories and captions.


# =======================
# Categories
# =======================
def test_category_crud(client, make_category):
    category_id = make_category("Keluarga")

    response = client.put(f"/api/categories/{category_id}", json={"name": "Keluarga Besar"})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Kategori berhasil diperbarui.",
        "id": category_id,
        "name": "Keluarga Besar",
    }

    response = client.delete(f"/api/categories/{category_id}")
    assert response.status_code == 200
    assert response.json() == {"message": "Kategori berhasil dihapus."}
    assert client.get("/api/categories").json() == []


def test_list_counts_invitations(client, make_category, make_invitation):
    family = make_category("Keluarga")
    friends = make_category("Teman")
    make_invitation(category=family)
    make_invitation(category=family)

    assert client.get("/api/categories").json() == [
        {"id": friends, "name": "Teman", "total_guests": 0},
        {"id": family, "name": "Keluarga", "total_guests": 2},
    ]


def test_category_requires_name(client):
    response = client.post("/api/categories", json={"name": " "})

    assert response.status_code == 400
    assert response.json() == {"error": "Field name wajib diisi.", "field": "name"}


def test_unknown_category(client):
    assert client.put("/api/categories/9", json={"name": "X"}).json() == {"error": "Kategori tidak ditemukan."}
    assert client.delete("/api/categories/9").status_code == 404


def test_delete_category_detaches_invitations(client, make_category, make_invitation):
    category_id = make_category()
    client.post("/api/captions", json={"category_id": category_id, "caption_text": "Halo keluarga"})
    slug = make_invitation(category=category_id)["slug"]

    client.delete(f"/api/categories/{category_id}")

    body = client.get(f"/api/invitations/{slug}").json()
    assert body["category"] is None
    assert body["category_name"] is None
    assert body["caption_text"] is None
    assert client.get("/api/captions").json() == []


# =======================
# Captions
# =======================
def test_create_and_fetch_caption(client, make_category):
    category_id = make_category()

    response = client.post("/api/captions", json={"category_id": category_id, "caption_text": "Dengan hormat"})

    assert response.status_code == 201
    caption_id = response.json()["id"]
    assert response.json() == {"success": True, "id": caption_id}

    caption = client.get(f"/api/captions/{category_id}").json()
    assert caption["id"] == caption_id
    assert caption["caption_text"] == "Dengan hormat"
    assert caption["is_active"] is True


def test_inactive_caption_is_not_served(client, make_category):
    category_id = make_category()
    client.post(
        "/api/captions",
        json={"category_id": category_id, "caption_text": "Draf", "is_active": False},
    )

    response = client.get(f"/api/captions/{category_id}")

    assert response.status_code == 404
    assert response.json() == {"error": "Caption untuk kategori ini tidak ditemukan."}
    assert len(client.get("/api/captions").json()) == 1


def test_caption_validation(client, make_category):
    response = client.post("/api/captions", json={"caption_text": "Halo"})
    assert response.status_code == 400
    assert response.json() == {"error": "Field category_id wajib diisi.", "field": "category_id"}

    response = client.post("/api/captions", json={"category_id": make_category()})
    assert response.status_code == 400
    assert response.json()["field"] == "caption_text"


def test_caption_for_unknown_category(client):
    response = client.post("/api/captions", json={"category_id": 77, "caption_text": "Halo"})

    assert response.status_code == 404
    assert response.json() == {"error": "Kategori tidak ditemukan."}
