# invitation_service/links.py
# =================================================================================
# 🔗 Confirmation / invite links and QR image URL for an invitation slug.
# The QR image itself is rendered by an external endpoint; we only build its URL.
# =================================================================================

from urllib.parse import quote

from invitation_service.config import Settings


def _join(base: str, path: str, slug: str) -> str:
    path = "/" + path.strip("/") if path.strip("/") else ""
    return f"{base.rstrip('/')}{path}/{slug}"


def confirm_link(settings: Settings, slug: str) -> str:
    """Internal link opened by the scanner / confirmation page."""
    return _join(settings.link_base, settings.confirm_path, slug)


def invite_link(settings: Settings, slug: str) -> str:
    """Link shared with the guest (WhatsApp message, copy button)."""
    return _join(settings.link_base, settings.invite_path, slug)


def qr_url(settings: Settings, slug: str) -> str:
    payload = confirm_link(settings, slug) if settings.qr_payload == "link" else slug
    return f"{settings.qr_api_url}?data={quote(payload, safe='')}&size=200x200"


def build_links(settings: Settings, slug: str) -> dict:
    return {
        "confirm_link": confirm_link(settings, slug),
        "invite_link": invite_link(settings, slug),
        "qrcode": qr_url(settings, slug),
    }
