from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from redseal.db.session import get_db
from redseal.routers.locations import _active_only
from redseal.schemas.trade import TradesBySectorResponse, TradesResponse
from redseal.services.lookups import LookupService, group_trades_by_sector

router = APIRouter(prefix="/api", tags=["trades"])


@router.get("/trades", response_model=TradesResponse | TradesBySectorResponse)
def list_trades(active: str | None = None, grouped: str | None = None, db: Session = Depends(get_db)):
    trades = LookupService(db).list_trades(active_only=_active_only(active))

    if str(grouped or "").strip().lower() == "true":
        body = TradesBySectorResponse(trades_by_sector=group_trades_by_sector(trades), count=len(trades))
        return JSONResponse(content=body.model_dump(by_alias=True))

    return TradesResponse(trades=trades, count=len(trades))
