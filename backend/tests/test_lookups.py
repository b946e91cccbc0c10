from redseal.services.lookups import group_trades_by_sector


def test_countries_active_only_by_default(client):
    r = client.get("/api/countries")
    assert r.status_code == 200
    body = r.json()
    codes = [c["code"] for c in body["countries"]]
    assert codes == ["CA", "US"]
    assert body["total"] == 2
    assert body["countries"][0]["region_label"] == "Province/Territory"


def test_countries_include_inactive(client):
    r = client.get("/api/countries", params={"active": "false"})
    assert r.status_code == 200
    assert "ZZ" in [c["code"] for c in r.json()["countries"]]


def test_regions_filtered_by_country_code_case_insensitive(client):
    r = client.get("/api/regions", params={"country_code": "ca"})
    assert r.status_code == 200
    body = r.json()
    assert body["country_code"] == "CA"
    assert [x["code"] for x in body["regions"]] == ["AB", "BC"]
    assert body["total"] == 2


def test_regions_without_country_code(client):
    r = client.get("/api/regions")
    assert r.status_code == 200
    body = r.json()
    assert body["country_code"] is None
    assert {x["country_code"] for x in body["regions"]} == {"CA", "US"}


def test_trades_flat_sorted_by_name(client):
    r = client.get("/api/trades")
    assert r.status_code == 200
    body = r.json()
    names = [t["trade_name"] for t in body["trades"]]
    assert names == sorted(names)
    assert "Retired Trade" not in names
    assert body["count"] == len(names)
    drone = next(t for t in body["trades"] if t["trade_code"] == "drone_pilot")
    assert drone["sector"] == "Other"


def test_trades_grouped_by_sector(client):
    r = client.get("/api/trades", params={"grouped": "true"})
    assert r.status_code == 200
    body = r.json()
    assert "tradesBySector" in body
    grouped = body["tradesBySector"]
    assert list(grouped) == ["Construction", "Motive Power", "Industrial", "Service", "Other"]
    assert [t["trade_name"] for t in grouped["Construction"]] == ["Electrician", "Plumber"]
    assert body["count"] == 6


def test_group_trades_drops_empty_known_sectors():
    trades = [
        {"trade_name": "Cook", "sector": "Service"},
        {"trade_name": "Rigger", "sector": "Marine"},
        {"trade_name": "Welder", "sector": "Construction"},
    ]
    grouped = group_trades_by_sector(trades)
    assert list(grouped) == ["Construction", "Service", "Marine"]
    assert "Motive Power" not in grouped
