"""External map and search sites an address can be opened in."""
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote


def _enc(value: Optional[str]) -> str:
    return quote(value or "", safe="")


def _here_wego(address: str, coords: Optional[Dict[str, float]]) -> str:
    if coords:
        lat, lng = coords["lat"], coords["lng"]
        return f"https://wego.here.com/l/{lat},{lng},18?map={lat},{lng},18,normal"
    return "https://wego.here.com/"


SITE_PROVIDERS: Dict[str, Dict[str, object]] = {
    "google-maps": {
        "label": "Google Maps",
        "category": "global",
        "build_url": lambda addr, coords: f"https://www.google.com/maps/search/?api=1&query={_enc(addr)}",
    },
    "google-search": {
        "label": "Google Search",
        "category": "global",
        "build_url": lambda addr, coords: f"https://www.google.com/search?q={_enc(addr)}",
    },
    "bing-maps": {
        "label": "Bing Maps",
        "category": "global",
        "build_url": lambda addr, coords: f"https://www.bing.com/maps/default.aspx?where1={_enc(addr)}",
    },
    "apple-maps": {
        "label": "Apple Maps",
        "category": "global",
        "build_url": lambda addr, coords: f"https://maps.apple.com/?q={_enc(addr)}",
    },
    "openstreetmap": {
        "label": "OpenStreetMap",
        "category": "global",
        "build_url": lambda addr, coords: f"https://www.openstreetmap.org/search?query={_enc(addr)}",
    },
    "mapquest": {
        "label": "MapQuest",
        "category": "global",
        "build_url": lambda addr, coords: f"https://www.mapquest.com/search/{_enc(addr)}",
    },
    "here-site": {
        "label": "HERE WeGo",
        "category": "global",
        "build_url": _here_wego,
    },
    "usps-site": {
        "label": "USPS ZIP Lookup",
        "category": "global",
        "build_url": lambda addr, coords: "https://tools.usps.com/zip-code-lookup.htm?byaddress",
    },
    "baidu-maps": {
        "label": "Baidu Maps",
        "category": "regional",
        "region": "China",
        "build_url": lambda addr, coords: f"https://map.baidu.com/search/{_enc(addr)}/?querytype=s&wd={_enc(addr)}",
    },
    "amap": {
        "label": "Amap / Gaode",
        "category": "regional",
        "region": "China",
        "build_url": lambda addr, coords: f"https://www.amap.com/search?query={_enc(addr)}",
    },
    "yandex-maps": {
        "label": "Yandex Maps",
        "category": "regional",
        "region": "Russia & CIS",
        "build_url": lambda addr, coords: f"https://yandex.com/maps/?mode=search&text={_enc(addr)}",
    },
    "naver-maps": {
        "label": "Naver Maps",
        "category": "regional",
        "region": "South Korea",
        "build_url": lambda addr, coords: f"https://map.naver.com/v5/search/{_enc(addr)}",
    },
    "kakao-map": {
        "label": "KakaoMap",
        "category": "regional",
        "region": "South Korea",
        "build_url": lambda addr, coords: f"https://map.kakao.com/?q={_enc(addr)}",
    },
    "mapy-cz": {
        "label": "Mapy.cz",
        "category": "regional",
        "region": "Czech Republic & EU",
        "build_url": lambda addr, coords: f"https://mapy.cz/zakladni?q={_enc(addr)}",
    },
}

SITE_OPEN_ORDER = (
    "google-maps",
    "google-search",
    "bing-maps",
    "apple-maps",
    "openstreetmap",
    "mapquest",
    "here-site",
    "usps-site",
    # Regional, any order
    "baidu-maps",
    "amap",
    "yandex-maps",
    "naver-maps",
    "kakao-map",
    "mapy-cz",
)

DEFAULT_SITES = ("google-maps", "here-site", "usps-site")


def build_site_links(
    address: str,
    coords: Optional[Dict[str, float]] = None,
    enabled: Iterable[str] = DEFAULT_SITES
) -> List[Tuple[str, str, str]]:
    """
    Build (site id, label, url) for each enabled site in opening order.

    Unknown ids are skipped; known ids missing from SITE_OPEN_ORDER go last.
    """
    known = [site_id for site_id in dict.fromkeys(enabled) if site_id in SITE_PROVIDERS]
    order = {site_id: i for i, site_id in enumerate(SITE_OPEN_ORDER)}
    known.sort(key=lambda site_id: order.get(site_id, len(order)))

    links = []
    for site_id in known:
        provider = SITE_PROVIDERS[site_id]
        build_url: Callable = provider["build_url"]
        links.append((site_id, str(provider["label"]), build_url(address, coords)))
    return links
