from __future__ import annotations

import argparse
import os
import re
import sys

sys.path.append(os.getcwd())

from sqlalchemy import select

from redseal.client.catalog import load_sectors
from redseal.db.session import SessionLocal
from redseal.models.location import Country, Region
from redseal.models.trade import TradeSpecialization


# code, alpha3, name_en, name_fr, region_label, phone_code, currency
COUNTRIES = [
    ("CA", "CAN", "Canada", "Canada", "Province/Territory", "+1", "CAD"),
    ("US", "USA", "United States", "États-Unis", "State", "+1", "USD"),
    ("GB", "GBR", "United Kingdom", "Royaume-Uni", "Country", "+44", "GBP"),
    ("AU", "AUS", "Australia", "Australie", "State/Territory", "+61", "AUD"),
    ("NZ", "NZL", "New Zealand", "Nouvelle-Zélande", "Region", "+64", "NZD"),
    ("IE", "IRL", "Ireland", "Irlande", "Province", "+353", "EUR"),
]

REGIONS: dict[str, list[tuple[str, str, str]]] = {
    "CA": [
        ("AB", "Alberta", "province"),
        ("BC", "British Columbia", "province"),
        ("MB", "Manitoba", "province"),
        ("NB", "New Brunswick", "province"),
        ("NL", "Newfoundland and Labrador", "province"),
        ("NS", "Nova Scotia", "province"),
        ("ON", "Ontario", "province"),
        ("PE", "Prince Edward Island", "province"),
        ("QC", "Quebec", "province"),
        ("SK", "Saskatchewan", "province"),
        ("NT", "Northwest Territories", "territory"),
        ("NU", "Nunavut", "territory"),
        ("YT", "Yukon", "territory"),
    ],
    "US": [
        (code, name, "state")
        for code, name in (
            ("AL", "Alabama"), ("AK", "Alaska"), ("AZ", "Arizona"), ("AR", "Arkansas"), ("CA", "California"),
            ("CO", "Colorado"), ("CT", "Connecticut"), ("DE", "Delaware"), ("FL", "Florida"), ("GA", "Georgia"),
            ("HI", "Hawaii"), ("ID", "Idaho"), ("IL", "Illinois"), ("IN", "Indiana"), ("IA", "Iowa"),
            ("KS", "Kansas"), ("KY", "Kentucky"), ("LA", "Louisiana"), ("ME", "Maine"), ("MD", "Maryland"),
            ("MA", "Massachusetts"), ("MI", "Michigan"), ("MN", "Minnesota"), ("MS", "Mississippi"),
            ("MO", "Missouri"), ("MT", "Montana"), ("NE", "Nebraska"), ("NV", "Nevada"), ("NH", "New Hampshire"),
            ("NJ", "New Jersey"), ("NM", "New Mexico"), ("NY", "New York"), ("NC", "North Carolina"),
            ("ND", "North Dakota"), ("OH", "Ohio"), ("OK", "Oklahoma"), ("OR", "Oregon"), ("PA", "Pennsylvania"),
            ("RI", "Rhode Island"), ("SC", "South Carolina"), ("SD", "South Dakota"), ("TN", "Tennessee"),
            ("TX", "Texas"), ("UT", "Utah"), ("VT", "Vermont"), ("VA", "Virginia"), ("WA", "Washington"),
            ("WV", "West Virginia"), ("WI", "Wisconsin"), ("WY", "Wyoming"), ("DC", "District of Columbia"),
        )
    ],
    "GB": [
        ("ENG", "England", "country"),
        ("SCT", "Scotland", "country"),
        ("WLS", "Wales", "country"),
        ("NIR", "Northern Ireland", "country"),
    ],
    "AU": [
        ("NSW", "New South Wales", "state"),
        ("VIC", "Victoria", "state"),
        ("QLD", "Queensland", "state"),
        ("WA", "Western Australia", "state"),
        ("SA", "South Australia", "state"),
        ("TAS", "Tasmania", "state"),
        ("ACT", "Australian Capital Territory", "territory"),
        ("NT", "Northern Territory", "territory"),
    ],
    "NZ": [
        (code, name, "region")
        for code, name in (
            ("AUK", "Auckland"), ("BOP", "Bay of Plenty"), ("CAN", "Canterbury"), ("GIS", "Gisborne"),
            ("HKB", "Hawke's Bay"), ("MWT", "Manawatū-Whanganui"), ("MBH", "Marlborough"), ("NSN", "Nelson"),
            ("NTL", "Northland"), ("OTA", "Otago"), ("STL", "Southland"), ("TKI", "Taranaki"),
            ("TAS", "Tasman"), ("WKO", "Waikato"), ("WGN", "Wellington"), ("WTC", "West Coast"),
        )
    ],
    "IE": [
        ("C", "Connacht", "province"),
        ("L", "Leinster", "province"),
        ("M", "Munster", "province"),
        ("U", "Ulster", "province"),
    ],
}


def trade_code(name: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "_", name.strip().lower())
    return s.strip("_")


def seed(*, dry_run: bool = False) -> dict[str, int]:
    counts = {"countries": 0, "regions": 0, "trades": 0}
    db = SessionLocal()
    try:
        for i, (code, alpha3, name_en, name_fr, label, phone, currency) in enumerate(COUNTRIES):
            row = db.get(Country, code)
            if row is None:
                row = Country(code=code)
                db.add(row)
                counts["countries"] += 1
            row.code_alpha3 = alpha3
            row.name_en = name_en
            row.name_fr = name_fr
            row.region_label = label
            row.phone_code = phone
            row.currency_code = currency
            row.sort_order = i + 1
            row.is_active = True
        db.flush()

        for country_code, regions in REGIONS.items():
            existing = {
                r.code: r for r in db.scalars(select(Region).where(Region.country_code == country_code)).all()
            }
            for i, (code, name_en, kind) in enumerate(regions):
                row = existing.get(code)
                if row is None:
                    row = Region(country_code=country_code, code=code)
                    db.add(row)
                    counts["regions"] += 1
                row.name_en = name_en
                row.type = kind
                row.sort_order = i + 1
                row.is_active = True

        order = 0
        for sector in load_sectors():
            for trade in sector.trades:
                order += 1
                code = trade_code(trade.name)
                row = db.get(TradeSpecialization, code)
                if row is None:
                    row = TradeSpecialization(code=code)
                    db.add(row)
                    counts["trades"] += 1
                row.name_en = trade.name
                row.sector = sector.name
                row.sort_order = order
                row.is_active = True

        if dry_run:
            db.rollback()
        else:
            db.commit()
    finally:
        db.close()
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed countries, regions and Red Seal trades.")
    parser.add_argument("--dry-run", action="store_true", help="roll back instead of committing")
    args = parser.parse_args()

    counts = seed(dry_run=bool(args.dry_run))
    print(f"inserted countries={counts['countries']} regions={counts['regions']} trades={counts['trades']}")


if __name__ == "__main__":
    main()
