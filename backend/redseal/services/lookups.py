from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from redseal.models.location import Country, Region
from redseal.models.trade import TradeSpecialization


SECTOR_ORDER = ["Construction", "Motive Power", "Industrial", "Service"]


class LookupService:
    def __init__(self, db: Session):
        self.db = db

    def list_countries(self, *, active_only: bool = True) -> list[dict[str, Any]]:
        stmt = select(Country).order_by(Country.sort_order.asc(), Country.name_en.asc())
        if active_only:
            stmt = stmt.where(Country.is_active == True)  # noqa: E712
        return [
            {
                "code": c.code,
                "code_alpha3": c.code_alpha3,
                "name_en": c.name_en,
                "name_fr": c.name_fr,
                "region_label": c.region_label or "Province/State",
                "phone_code": c.phone_code,
                "currency_code": c.currency_code,
                "sort_order": int(c.sort_order or 0),
                "is_active": bool(c.is_active),
            }
            for c in self.db.scalars(stmt).all()
        ]

    def list_regions(self, *, country_code: str | None = None, active_only: bool = True) -> list[dict[str, Any]]:
        stmt = select(Region).order_by(Region.sort_order.asc(), Region.name_en.asc())
        if country_code:
            stmt = stmt.where(Region.country_code == country_code.upper())
        if active_only:
            stmt = stmt.where(Region.is_active == True)  # noqa: E712
        return [
            {
                "id": str(r.id),
                "country_code": r.country_code,
                "code": r.code,
                "name_en": r.name_en,
                "name_fr": r.name_fr,
                "type": r.type,
                "sort_order": int(r.sort_order or 0),
                "is_active": bool(r.is_active),
            }
            for r in self.db.scalars(stmt).all()
        ]

    def list_trades(self, *, active_only: bool = True) -> list[dict[str, Any]]:
        stmt = select(TradeSpecialization).order_by(TradeSpecialization.name_en.asc())
        if active_only:
            stmt = stmt.where(TradeSpecialization.is_active == True)  # noqa: E712
        return [
            {
                "trade_code": t.code,
                "trade_name": t.name_en,
                "sector": t.sector or "Other",
                "description": t.description_en,
                "noa_code": t.noa_code,
            }
            for t in self.db.scalars(stmt).all()
        ]

    def trade_name(self, code: str | None) -> str | None:
        if not code:
            return None
        return self.db.scalar(select(TradeSpecialization.name_en).where(TradeSpecialization.code == code))


def group_trades_by_sector(trades: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Known sectors first in their canonical order, unknown ones after; empty sectors dropped."""
    grouped: dict[str, list[dict[str, Any]]] = {s: [] for s in SECTOR_ORDER}
    for t in trades:
        grouped.setdefault(t.get("sector") or "Other", []).append(t)
    return {k: v for k, v in grouped.items() if v}
