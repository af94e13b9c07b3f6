# invitation_service/routers/meta.py  # Option lists for the dashboard forms.

from typing import Dict, List

from fastapi import APIRouter

from invitation_service.models import DeliveryStatusEnum, InvitationTypeEnum, RSVPStatusEnum

router = APIRouter(prefix="/api/meta", tags=["meta"])


@router.get("/options")
def get_meta_options() -> Dict[str, List[str]]:
    """Allowed values of the enum fields, so the frontend does not hard-code them."""
    return {
        "types": [e.value for e in InvitationTypeEnum],
        "rsvp_statuses": [e.value for e in RSVPStatusEnum],
        "delivery_statuses": [e.value for e in DeliveryStatusEnum],
    }
