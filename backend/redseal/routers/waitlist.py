from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from redseal.core.rate_limit import rate_limit
from redseal.db.session import get_db
from redseal.schemas.waitlist import WaitlistCreateRequest, WaitlistCreateResponse, WaitlistExistsResponse
from redseal.services.notification_jobs import enqueue_waitlist_followups
from redseal.services.waitlist import WaitlistService, entry_notification_payload

router = APIRouter(prefix="/api/waitlist", tags=["waitlist"])


@router.post("", response_model=WaitlistCreateResponse, status_code=201)
def join_waitlist(
    body: WaitlistCreateRequest,
    db: Session = Depends(get_db),
    _: object = rate_limit(key_prefix="waitlist", limit=10),
):
    entry = WaitlistService(db).create(body)

    # welcome email, admin notification, CRM sync
    enqueue_waitlist_followups(entry_notification_payload(entry))

    return {
        "success": True,
        "message": "Successfully joined the waitlist",
        "data": {"id": str(entry.id), "email": entry.email, "user_type": entry.user_type.value},
    }


@router.get("", response_model=WaitlistExistsResponse)
def check_waitlist(email: str | None = None, db: Session = Depends(get_db)):
    if not (email or "").strip():
        raise HTTPException(status_code=400, detail="Email parameter required")
    entry = WaitlistService(db).find_by_email(email)
    if entry is None:
        return {"exists": False}
    return {"exists": True, "user_type": entry.user_type.value, "joined_at": entry.created_at}
