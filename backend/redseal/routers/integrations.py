from fastapi import APIRouter, HTTPException

from redseal.core.rate_limit import rate_limit
from redseal.schemas.notifications import KlaviyoSyncRequest, KlaviyoSyncResponse
from redseal.services.klaviyo import KlaviyoError, sync_waitlist_profile

router = APIRouter(prefix="/api/integrations", tags=["integrations"])


@router.post("/klaviyo-sync", response_model=KlaviyoSyncResponse)
def klaviyo_sync(
    body: KlaviyoSyncRequest,
    _: object = rate_limit(key_prefix="klaviyo_sync", limit=20),
):
    try:
        profile_id = sync_waitlist_profile(body.model_dump())
    except KlaviyoError as e:
        detail = {"error_code": "klaviyo_error", "error_message": str(e)}
        if e.details:
            detail["details"] = e.details[:1000]
        raise HTTPException(status_code=e.status_code, detail=detail) from e
    return {"success": True, "profile_id": profile_id}
