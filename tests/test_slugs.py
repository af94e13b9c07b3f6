# tests/test_slugs.py
# Slug generation: numeric / name styles, collisions and the attempt limit.

import dataclasses
import re

import pytest
from fastapi.testclient import TestClient

from invitation_service.crud import invitations_crud
from invitation_service.crud.invitations_crud import SlugGenerationError, generate_unique_slug
from invitation_service.main import create_app


# =======================
# Helpers
# =======================
def test_slug_base_strips_accents_and_symbols():
    assert invitations_crud._slug_base("Émilie  Dupont!") == "emilie-dupont"
    assert invitations_crud._slug_base("  Budi & Sari  ") == "budi-sari"


def test_slug_base_falls_back_to_guest():
    assert invitations_crud._slug_base("") == "guest"
    assert invitations_crud._slug_base(None) == "guest"
    assert invitations_crud._slug_base("???") == "guest"


def test_numeric_candidate_is_six_digits():
    for _ in range(50):
        candidate = invitations_crud._numeric_candidate()
        assert re.fullmatch(r"[1-9]\d{5}", candidate)


# =======================
# generate_unique_slug
# =======================
def test_generate_skips_taken_slugs(db, make_invitation, monkeypatch):
    taken = make_invitation()["slug"]
    candidates = iter([taken, taken, "654321"])
    monkeypatch.setattr(invitations_crud, "_numeric_candidate", lambda: next(candidates))

    assert generate_unique_slug(db, max_attempts=3) == "654321"


def test_generate_raises_after_max_attempts(db, make_invitation, monkeypatch):
    taken = make_invitation()["slug"]
    calls = []

    def always_taken():
        calls.append(1)
        return taken

    monkeypatch.setattr(invitations_crud, "_numeric_candidate", always_taken)

    with pytest.raises(SlugGenerationError):
        generate_unique_slug(db, max_attempts=4)
    assert len(calls) == 4


def test_name_style_uses_guest_name(db):
    slug = generate_unique_slug(db, "Siti Nurhaliza", style="name", max_attempts=5)
    assert re.fullmatch(r"siti-nurhaliza-\d{4}", slug)


# =======================
# Through the API
# =======================
def test_create_returns_503_when_no_slug_is_free(client, make_invitation, monkeypatch):
    taken = make_invitation()["slug"]
    monkeypatch.setattr(invitations_crud, "_numeric_candidate", lambda: taken)

    response = client.post("/api/invitations", json={"name": "Ani", "type": "cetak"})

    assert response.status_code == 503
    assert response.json() == {"error": "Gagal membuat slug unik. Silakan coba lagi."}


def test_slugs_are_unique_across_invitations(make_invitation):
    slugs = {make_invitation(name=f"Tamu {i}")["slug"] for i in range(20)}
    assert len(slugs) == 20


def test_name_style_setting(settings):
    app = create_app(dataclasses.replace(settings, slug_style="name"))
    with TestClient(app) as client:
        response = client.post("/api/invitations", json={"name": "Dewi Lestari", "type": "digital"})

    assert response.status_code == 201
    assert re.fullmatch(r"dewi-lestari-\d{4}", response.json()["slug"])
