from __future__ import annotations

from pydantic import BaseModel


# Countries with region rows seeded in the database.
COUNTRIES_WITH_REGIONS = ("CA", "US", "GB", "AU", "NZ", "IE")


class CountryPublic(BaseModel):
    code: str
    code_alpha3: str | None
    name_en: str
    name_fr: str | None
    region_label: str
    phone_code: str | None
    currency_code: str | None
    sort_order: int
    is_active: bool


class CountriesResponse(BaseModel):
    countries: list[CountryPublic]
    total: int


class RegionPublic(BaseModel):
    id: str
    country_code: str
    code: str
    name_en: str
    name_fr: str | None
    type: str
    sort_order: int
    is_active: bool


class RegionsResponse(BaseModel):
    regions: list[RegionPublic]
    total: int
    country_code: str | None
