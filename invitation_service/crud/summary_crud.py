# invitation_service/crud/summary_crud.py

# =================================================================================
# 📊 Dashboard totals, computed in a single aggregate query.
# Guest counts of checked-in invitations use real_qty when known, else qty.
# The "belum check-in" figures are derived from the totals, as the scan page
# expects (guests still to arrive = invited - already counted).
# =================================================================================

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from invitation_service.models import Invitation, InvitationTypeEnum, RSVPStatusEnum


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def get_summary(db: Session) -> dict:
    checked = Invitation.checked_in.is_(True)
    attended = func.coalesce(Invitation.real_qty, Invitation.qty, 0)

    row = db.query(
        func.count(Invitation.id),
        func.coalesce(func.sum(Invitation.qty), 0),
        _count_where(checked),
        func.coalesce(func.sum(case((checked, attended), else_=0)), 0),
        _count_where(Invitation.type == InvitationTypeEnum.digital),
        _count_where(Invitation.type == InvitationTypeEnum.cetak),
        _count_where(Invitation.rsvp_status == RSVPStatusEnum.hadir),
        _count_where(Invitation.rsvp_status == RSVPStatusEnum.tidak_hadir),
        _count_where(Invitation.rsvp_status == RSVPStatusEnum.belum_konfirmasi),
    ).one()

    (
        total, total_guests, checked_inv, checked_guests,
        digital, cetak, hadir, tidak_hadir, belum,
    ) = (int(v or 0) for v in row)

    return {
        "totalUndangan": total,
        "totalTamu": total_guests,
        "checkedInUndangan": checked_inv,
        "checkedInTamu": checked_guests,
        "belumCheckInUndangan": total - checked_inv,
        "belumCheckInTamu": total_guests - checked_guests,
        "digital": digital,
        "cetak": cetak,
        "confirmed": {
            "hadir": hadir,
            "tidak_hadir": tidak_hadir,
            "belum_konfirmasi": belum,
        },
        # legacy names kept for older dashboard components
        "total": total,
        "estimasi_tamu": total_guests,
    }
