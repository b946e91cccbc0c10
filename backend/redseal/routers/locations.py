from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from redseal.db.session import get_db
from redseal.schemas.location import CountriesResponse, RegionsResponse
from redseal.services.lookups import LookupService

router = APIRouter(prefix="/api", tags=["locations"])


def _active_only(active: str | None) -> bool:
    # anything but an explicit "false" keeps the filter on
    return str(active or "").strip().lower() != "false"


@router.get("/countries", response_model=CountriesResponse)
def list_countries(active: str | None = None, db: Session = Depends(get_db)):
    countries = LookupService(db).list_countries(active_only=_active_only(active))
    return {"countries": countries, "total": len(countries)}


@router.get("/regions", response_model=RegionsResponse)
def list_regions(country_code: str | None = None, active: str | None = None, db: Session = Depends(get_db)):
    code = (country_code or "").strip().upper() or None
    regions = LookupService(db).list_regions(country_code=code, active_only=_active_only(active))
    return {"regions": regions, "total": len(regions), "country_code": code}
