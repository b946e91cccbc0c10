from __future__ import annotations

from pydantic import BaseModel, Field


class TradePublic(BaseModel):
    trade_code: str
    trade_name: str
    sector: str
    description: str | None
    noa_code: str | None


class TradesResponse(BaseModel):
    trades: list[TradePublic]
    count: int


class TradesBySectorResponse(BaseModel):
    trades_by_sector: dict[str, list[TradePublic]] = Field(serialization_alias="tradesBySector")
    count: int
