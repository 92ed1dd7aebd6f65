"""Tests for external site links."""
from address_verifier.core.sites import DEFAULT_SITES, SITE_OPEN_ORDER, SITE_PROVIDERS, build_site_links


def test_default_sites_in_open_order():
    links = build_site_links("1 Main St, Springfield, IL")

    assert [site_id for site_id, _, _ in links] == list(DEFAULT_SITES)
    assert links[0][2] == "https://www.google.com/maps/search/?api=1&query=1%20Main%20St%2C%20Springfield%2C%20IL"


def test_order_follows_open_order_not_input():
    links = build_site_links("x", enabled=["usps-site", "bing-maps", "google-search"])
    assert [site_id for site_id, _, _ in links] == ["google-search", "bing-maps", "usps-site"]


def test_unknown_and_duplicate_sites_skipped():
    links = build_site_links("x", enabled=["nope", "mapquest", "mapquest"])
    assert [site_id for site_id, _, _ in links] == ["mapquest"]


def test_here_link_uses_coordinates():
    _, label, url = build_site_links("x", {"lat": 38.9, "lng": -77.0}, ["here-site"])[0]

    assert label == "HERE WeGo"
    assert "38.9,-77.0" in url
    assert build_site_links("x", None, ["here-site"])[0][2] == "https://wego.here.com/"


def test_regional_sites_follow_global_ones():
    links = build_site_links("Praha 1", enabled=["mapy-cz", "baidu-maps", "google-maps"])

    assert [site_id for site_id, _, _ in links] == ["google-maps", "baidu-maps", "mapy-cz"]
    assert links[2][2] == "https://mapy.cz/zakladni?q=Praha%201"


def test_regional_sites_carry_region():
    regional = {site_id: p for site_id, p in SITE_PROVIDERS.items() if p["category"] == "regional"}

    assert set(regional) == {"baidu-maps", "amap", "yandex-maps", "naver-maps", "kakao-map", "mapy-cz"}
    assert all(p["region"] for p in regional.values())
    assert set(regional) <= set(SITE_OPEN_ORDER)
