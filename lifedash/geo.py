# =============================================================================
# Country geometry: base layer download and per-year join with the dataset
# =============================================================================
import json
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import requests

from . import config
from .errors import GeoLoadError

logger = logging.getLogger(__name__)

# ISO 3166-1 numeric id -> ISO3 code (the base layer is keyed by the numeric id)
COUNTRY_ID_TO_ISO3 = {
    4: "AFG", 8: "ALB", 10: "ATA", 12: "DZA", 16: "ASM", 20: "AND", 24: "AGO", 28: "ATG",
    31: "AZE", 32: "ARG", 36: "AUS", 40: "AUT", 44: "BHS", 48: "BHR", 50: "BGD", 51: "ARM",
    52: "BRB", 56: "BEL", 60: "BMU", 64: "BTN", 68: "BOL", 70: "BIH", 72: "BWA", 74: "BVT",
    76: "BRA", 84: "BLZ", 86: "IOT", 90: "SLB", 92: "VGB", 96: "BRN", 100: "BGR", 104: "MMR",
    108: "BDI", 112: "BLR", 116: "KHM", 120: "CMR", 124: "CAN", 132: "CPV", 136: "CYM", 140: "CAF",
    144: "LKA", 148: "TCD", 152: "CHL", 156: "CHN", 158: "TWN", 162: "CXR", 166: "CCK", 170: "COL",
    174: "COM", 175: "MYT", 178: "COG", 180: "COD", 184: "COK", 188: "CRI", 191: "HRV", 192: "CUB",
    196: "CYP", 203: "CZE", 204: "BEN", 208: "DNK", 212: "DMA", 214: "DOM", 218: "ECU", 222: "SLV",
    226: "GNQ", 231: "ETH", 232: "ERI", 233: "EST", 234: "FRO", 238: "FLK", 239: "SGS", 242: "FJI",
    246: "FIN", 248: "ALA", 250: "FRA", 254: "GUF", 258: "PYF", 260: "ATF", 262: "DJI", 266: "GAB",
    268: "GEO", 270: "GMB", 275: "PSE", 276: "DEU", 288: "GHA", 292: "GIB", 296: "KIR", 300: "GRC",
    304: "GRL", 308: "GRD", 312: "GLP", 316: "GUM", 320: "GTM", 324: "GIN", 328: "GUY", 332: "HTI",
    334: "HMD", 336: "VAT", 340: "HND", 344: "HKG", 348: "HUN", 352: "ISL", 356: "IND", 360: "IDN",
    364: "IRN", 368: "IRQ", 372: "IRL", 376: "ISR", 380: "ITA", 384: "CIV", 388: "JAM", 392: "JPN",
    398: "KAZ", 400: "JOR", 404: "KEN", 408: "PRK", 410: "KOR", 414: "KWT", 417: "KGZ", 418: "LAO",
    422: "LBN", 426: "LSO", 428: "LVA", 430: "LBR", 434: "LBY", 438: "LIE", 440: "LTU", 442: "LUX",
    446: "MAC", 450: "MDG", 454: "MWI", 458: "MYS", 462: "MDV", 466: "MLI", 470: "MLT", 474: "MTQ",
    478: "MRT", 480: "MUS", 484: "MEX", 492: "MCO", 496: "MNG", 498: "MDA", 499: "MNE", 500: "MSR",
    504: "MAR", 508: "MOZ", 512: "OMN", 516: "NAM", 520: "NRU", 524: "NPL", 528: "NLD", 531: "CUW",
    533: "ABW", 534: "SXM", 535: "BES", 540: "NCL", 548: "VUT", 554: "NZL", 558: "NIC", 562: "NER",
    566: "NGA", 570: "NIU", 574: "NFK", 578: "NOR", 580: "MNP", 581: "UMI", 583: "FSM", 584: "MHL",
    585: "PLW", 586: "PAK", 591: "PAN", 598: "PNG", 600: "PRY", 604: "PER", 608: "PHL", 612: "PCN",
    616: "POL", 620: "PRT", 624: "GNB", 626: "TLS", 630: "PRI", 634: "QAT", 638: "REU", 642: "ROU",
    643: "RUS", 646: "RWA", 652: "BLM", 654: "SHN", 659: "KNA", 660: "AIA", 662: "LCA", 663: "MAF",
    666: "SPM", 670: "VCT", 674: "SMR", 678: "STP", 682: "SAU", 686: "SEN", 688: "SRB", 690: "SYC",
    694: "SLE", 702: "SGP", 703: "SVK", 704: "VNM", 705: "SVN", 706: "SOM", 710: "ZAF", 716: "ZWE",
    724: "ESP", 728: "SSD", 729: "SDN", 732: "ESH", 740: "SUR", 744: "SJM", 748: "SWZ", 752: "SWE",
    756: "CHE", 760: "SYR", 762: "TJK", 764: "THA", 768: "TGO", 772: "TKL", 776: "TON", 780: "TTO",
    784: "ARE", 788: "TUN", 792: "TUR", 795: "TKM", 796: "TCA", 798: "TUV", 800: "UGA", 804: "UKR",
    807: "MKD", 818: "EGY", 826: "GBR", 831: "GGY", 832: "JEY", 833: "IMN", 834: "TZA", 840: "USA",
    850: "VIR", 854: "BFA", 858: "URY", 860: "UZB", 862: "VEN", 876: "WLF", 882: "WSM", 887: "YEM",
    894: "ZMB",
}


# -----------------------------
# BASE LAYER
# -----------------------------
def download_geojson(url: str = None, cache_path: Path = None, timeout: int = None) -> dict:
    url = url or config.GEO_URL
    cache_path = Path(cache_path or config.GEO_CACHE)
    timeout = timeout or config.GEO_TIMEOUT

    if cache_path.exists():
        try:
            return json.loads(cache_path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise GeoLoadError(f"Cached geometry {cache_path} is not valid JSON") from e

    logger.info("Downloading country borders GeoJSON from %s", url)
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        geojson = r.json()
    except (requests.RequestException, ValueError) as e:
        raise GeoLoadError(f"Could not download country borders: {e}") from e

    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(json.dumps(geojson), encoding="utf-8")
        logger.info("Saved GeoJSON to %s", cache_path)
    except OSError as e:
        logger.warning("Could not cache GeoJSON at %s: %s", cache_path, e)
    return geojson


def feature_numeric_id(feature: dict) -> Optional[int]:
    fid = feature.get("id")
    if isinstance(fid, int):
        return fid
    props = feature.get("properties") or {}
    for value in (fid, props.get("ISO_N3"), props.get("ISO_N3_EH")):
        try:
            num = int(str(value))
        except (TypeError, ValueError):
            continue
        if num > 0:
            return num
    return None


def base_features(geojson: dict) -> List[dict]:
    """Strip a FeatureCollection down to geometry, numeric id and name."""
    if not isinstance(geojson, dict) or "features" not in geojson:
        raise GeoLoadError("Geometry is not a GeoJSON FeatureCollection")
    features = []
    for f in geojson["features"]:
        props = f.get("properties") or {}
        features.append({
            "type": "Feature",
            "id": feature_numeric_id(f),
            "geometry": f.get("geometry"),
            "properties": {"name": props.get("NAME") or props.get("name") or ""},
        })
    logger.info("Total countries in world data: %d", len(features))
    return features


def load_base_features(url: str = None, cache_path: Path = None) -> List[dict]:
    return base_features(download_geojson(url, cache_path))


# -----------------------------
# JOIN
# -----------------------------
def _number(value) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


def join_features(
    features: List[dict],
    rows: pd.DataFrame,
    id_to_code: Dict[int, str] = COUNTRY_ID_TO_ISO3,
) -> List[dict]:
    """Attach one year's rows to the base geometry.

    Builds fresh feature dicts on every call. Features without a matching row
    keep null data properties; rows without a matching feature are ignored.
    """
    by_code = {}
    for rec in rows.to_dict("records"):
        if rec.get("code"):
            by_code[rec["code"]] = rec

    joined = []
    for f in features:
        iso = id_to_code.get(f["id"], "") if f.get("id") is not None else ""
        rec = by_code.get(iso)
        joined.append({
            "type": "Feature",
            "id": f.get("id"),
            "geometry": f.get("geometry"),
            "properties": {
                "name": (f.get("properties") or {}).get("name", ""),
                "iso_a3": iso,
                "id": f.get("id"),
                "country": rec["country"] if rec else None,
                "continent": rec["continent"] if rec else None,
                config.LIFE: _number(rec[config.LIFE]) if rec else None,
                config.ENERGY: _number(rec[config.ENERGY]) if rec else None,
            },
        })

    unmatched = set(by_code) - {f["properties"]["iso_a3"] for f in joined}
    if features and unmatched:
        logger.warning("%d rows have no map feature: %s", len(unmatched), ", ".join(sorted(unmatched)[:10]))
    return joined
