# tests/test_rsvp_checkin.py
# RSVP confirmation (kehadiran) and the QR check-in flow.

from datetime import datetime

import pytest
from sqlalchemy.dialects import postgresql

from invitation_service.crud import checkins_crud
from invitation_service.models import Invitation


def _checkin_log(client, slug):
    body = client.get(f"/api/invitations/{slug}", params={"include": "checkins"}).json()
    return body["checkins"]


# =======================
# RSVP
# =======================
def test_rsvp_hadir_with_count(client, make_invitation):
    slug = make_invitation()["slug"]

    response = client.patch(
        f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Hadir", "jumlah_real": "3"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Kehadiran berhasil dikonfirmasi."
    assert body["rsvp_status"] == "Hadir"
    assert body["jumlah_real"] == 3
    assert body["real_qty"] == 3


def test_rsvp_tidak_hadir_forces_zero(client, make_invitation):
    slug = make_invitation()["slug"]

    body = client.patch(
        f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Tidak Hadir", "jumlah_real": 4}
    ).json()

    assert body["rsvp_status"] == "Tidak Hadir"
    assert body["real_qty"] == 0


@pytest.mark.parametrize("count", ["abc", -3, 1.5, True, None])
def test_rsvp_tidak_hadir_ignores_any_count(client, make_invitation, count):
    slug = make_invitation()["slug"]

    response = client.patch(
        f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Tidak Hadir", "jumlah_real": count}
    )

    assert response.status_code == 200
    assert response.json()["real_qty"] == 0


def test_rsvp_leaves_checkin_state_alone(client, make_invitation):
    slug = make_invitation(qty=2)["slug"]
    client.patch(f"/api/invitations/checkin/{slug}")
    before = client.get(f"/api/invitations/{slug}", params={"include": "checkins"}).json()

    client.patch(f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Tidak Hadir"})

    after = client.get(f"/api/invitations/{slug}", params={"include": "checkins"}).json()
    assert after["rsvp_status"] == "Tidak Hadir"
    assert after["real_qty"] == 0
    assert after["checked_in"] is True
    assert after["checked_in_at"] == before["checked_in_at"]
    assert after["checkins"] == before["checkins"]


def test_rsvp_can_be_reset(client, make_invitation):
    slug = make_invitation()["slug"]
    client.patch(f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Hadir", "jumlah_real": 2})

    body = client.patch(
        f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Belum Konfirmasi", "jumlah_real": ""}
    ).json()

    assert body["rsvp_status"] == "Belum Konfirmasi"
    assert body["real_qty"] is None


def test_rsvp_requires_status(client, make_invitation):
    slug = make_invitation()["slug"]

    response = client.patch(f"/api/invitations/{slug}/kehadiran", json={"jumlah_real": 2})

    assert response.status_code == 400
    assert response.json() == {"error": "rsvp_status wajib diisi.", "field": "rsvp_status"}


def test_rsvp_rejects_unknown_status(client, make_invitation):
    slug = make_invitation()["slug"]

    response = client.patch(f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Mungkin"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("rsvp_status harus salah satu")


def test_rsvp_rejects_negative_count(client, make_invitation):
    slug = make_invitation()["slug"]

    response = client.patch(
        f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Hadir", "jumlah_real": -1}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Field jumlah_real tidak boleh negatif.", "field": "jumlah_real"}


def test_rsvp_unknown_slug(client):
    response = client.patch("/api/invitations/000000/kehadiran", json={"rsvp_status": "Hadir"})

    assert response.status_code == 404
    assert response.json() == {"error": "Undangan tidak ditemukan."}


# =======================
# Check-in
# =======================
def test_first_scan_marks_invitation(client, make_invitation):
    slug = make_invitation(qty=2)["slug"]

    response = client.patch(f"/api/invitations/checkin/{slug}")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Check-in berhasil."
    assert body["first_checkin"] is True
    assert body["name"] == "Budi Santoso"
    assert body["qty_recorded"] == 2
    assert body["scan_count"] == 1
    assert body["checked_in"] is True
    assert body["checked_in_at"] is not None
    assert body["real_qty"] == 2
    assert body["rsvp_status"] == "Belum Konfirmasi"


def test_first_scan_prefers_rsvp_count(client, make_invitation):
    slug = make_invitation(qty=2)["slug"]
    client.patch(f"/api/invitations/{slug}/kehadiran", json={"rsvp_status": "Hadir", "jumlah_real": 4})

    body = client.patch(f"/api/invitations/checkin/{slug}").json()

    assert body["qty_recorded"] == 4
    assert body["real_qty"] == 4


def test_repeat_scan_bumps_counter(client, make_invitation):
    slug = make_invitation(qty=2)["slug"]
    client.patch(f"/api/invitations/checkin/{slug}")

    response = client.patch(
        f"/api/invitations/checkin/{slug}",
        json={"checked_in_qty": 5, "device_note": "Meja tamu 2"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "Scan diterima (tamu sudah pernah check-in)."
    assert body["first_checkin"] is False
    assert body["scan_count"] == 2
    assert body["qty_recorded"] == 5
    # attendance recorded on the first scan is kept
    assert body["real_qty"] == 2

    logs = _checkin_log(client, slug)
    assert len(logs) == 1
    assert logs[0]["scan_count"] == 2
    assert logs[0]["checked_in_qty"] == 5
    assert logs[0]["device_note"] == "Meja tamu 2"


def test_scan_without_any_count(client, make_invitation):
    slug = make_invitation(qty=None)["slug"]

    body = client.patch(f"/api/invitations/checkin/{slug}").json()

    assert body["first_checkin"] is True
    assert body["qty_recorded"] == 0
    assert body["real_qty"] is None


def test_checked_in_invitation_without_log(client, db, make_invitation):
    slug = make_invitation(qty=3)["slug"]
    inv = db.query(Invitation).filter(Invitation.slug == slug).one()
    inv.checked_in = True
    db.commit()

    body = client.patch(f"/api/invitations/checkin/{slug}").json()

    assert body["first_checkin"] is False
    assert body["scan_count"] == 1
    assert body["qty_recorded"] == 3
    assert body["real_qty"] is None
    assert len(_checkin_log(client, slug)) == 1


def test_checkin_unknown_slug(client):
    response = client.patch("/api/invitations/checkin/000000")

    assert response.status_code == 404
    assert response.json() == {"error": "Undangan tidak ditemukan."}


def test_checkin_rejects_negative_qty(client, make_invitation):
    slug = make_invitation()["slug"]

    response = client.patch(f"/api/invitations/checkin/{slug}", json={"checked_in_qty": -2})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Field checked_in_qty tidak boleh negatif.",
        "field": "checked_in_qty",
    }
    assert client.get(f"/api/invitations/{slug}").json()["checked_in"] is False


def test_repeat_scan_refreshes_checkin_time(client, make_invitation, monkeypatch):
    times = iter([datetime(2026, 6, 1, 18, 0, 0), datetime(2026, 6, 1, 19, 30, 0)])
    monkeypatch.setattr(checkins_crud, "_utcnow", lambda: next(times))
    slug = make_invitation()["slug"]

    first = client.patch(f"/api/invitations/checkin/{slug}").json()
    second = client.patch(f"/api/invitations/checkin/{slug}").json()

    assert datetime.fromisoformat(second["checked_in_at"]) > datetime.fromisoformat(first["checked_in_at"])
    assert second["checked_in_at"] == "2026-06-01T19:30:00"
    assert second["checked_in"] is True

    log = _checkin_log(client, slug)[0]
    assert log["checked_in_at"] == "2026-06-01T18:00:00"
    assert log["last_scan_at"] == "2026-06-01T19:30:00"


def test_scan_without_note_keeps_previous_note(client, make_invitation):
    slug = make_invitation()["slug"]
    client.patch(f"/api/invitations/checkin/{slug}", json={"device_note": "Pintu utara"})

    client.patch(f"/api/invitations/checkin/{slug}")

    log = _checkin_log(client, slug)[0]
    assert log["scan_count"] == 2
    assert log["device_note"] == "Pintu utara"


def test_checkin_lock_targets_invitation_row_only():
    sql = str(checkins_crud.lock_invitation_stmt("123456").compile(dialect=postgresql.dialect()))

    assert "FOR UPDATE OF invitations" in sql
    assert "OUTER JOIN" not in sql
