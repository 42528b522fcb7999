# geogroup/util/facilities.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from geogroup.errors import FacilityFileError
from geogroup.geo.types import GeoPoint


logger = logging.getLogger(__name__)

NAME_COLUMNS = [
    "name", "facility", "facility name", "location", "site", "site name",
    "facility_name", "location_name", "site_name", "facilityname",
]
LAT_COLUMNS = ["lat", "latitude", "lat.", "y", "lat_deg", "latitude_deg"]
LON_COLUMNS = [
    "lon", "lng", "long", "longitude", "lon.", "lng.", "long.",
    "x", "lon_deg", "lng_deg", "longitude_deg",
]
ID_COLUMNS = ["facility_id", "id", "site_id"]


def find_column(headers: Iterable[str], aliases: List[str]) -> Optional[str]:
    """
    Exact (case/space-insensitive) alias match first, then the first header
    that contains an alias. Single-letter aliases ("x", "y") only match
    exactly, otherwise "facility" would be read as a latitude column.
    """
    headers = list(headers)
    lowered = [str(h).strip().lower() for h in headers]

    for alias in aliases:
        if alias in lowered:
            return headers[lowered.index(alias)]

    for alias in aliases:
        if len(alias) < 2:
            continue
        for i, h in enumerate(lowered):
            if alias in h:
                return headers[i]

    return None


def load_facilities_csv(path: str | Path) -> pd.DataFrame:
    """
    Reads a facility list exported from a spreadsheet.

    Returns DataFrame with:
      - facility_id (id column if present, else 1-based row number)
      - name
      - latitude, longitude (float, validated)

    Rows with no name or unusable coordinates are skipped and logged.
    """
    path = Path(path)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    name_col = find_column(df.columns, NAME_COLUMNS)
    lat_col = find_column(df.columns, LAT_COLUMNS)
    lon_col = find_column(df.columns, LON_COLUMNS)

    problems = []
    if name_col is None:
        problems.append("could not detect facility name column")
    if lat_col is None:
        problems.append("could not detect latitude column")
    if lon_col is None:
        problems.append("could not detect longitude column")
    if problems:
        raise FacilityFileError(path, problems)

    id_col = find_column(df.columns, ID_COLUMNS)
    # "id" is a substring of plenty of unrelated headers; only trust exact hits
    if id_col is not None and str(id_col).strip().lower() not in ID_COLUMNS:
        id_col = None

    out = pd.DataFrame()
    out["facility_id"] = df[id_col].str.strip() if id_col else pd.Series(range(1, len(df) + 1), dtype=int)
    out["name"] = df[name_col].str.strip()
    out["latitude"] = pd.to_numeric(df[lat_col], errors="coerce")
    out["longitude"] = pd.to_numeric(df[lon_col], errors="coerce")

    # spreadsheet row numbers (header is row 1)
    out["row"] = range(2, len(df) + 2)

    missing_name = out["name"] == ""
    bad_coords = (
        out["latitude"].isna()
        | out["longitude"].isna()
        | ~out["latitude"].between(-90, 90)
        | ~out["longitude"].between(-180, 180)
    )

    for _, r in out[missing_name].iterrows():
        logger.warning("%s row %d: missing facility name, skipped", path.name, r["row"])
    for _, r in out[~missing_name & bad_coords].iterrows():
        logger.warning(
            "%s row %d: invalid coordinates for %r, skipped", path.name, r["row"], r["name"]
        )

    out = out[~missing_name & ~bad_coords].drop(columns=["row"]).reset_index(drop=True)
    logger.info("loaded %d facilities from %s", len(out), path)
    return out


def load_home_base_json(path: str | Path) -> GeoPoint:
    """
    Expects JSON like {"latitude": 31.99, "longitude": -102.07}
    (short "lat"/"lon" keys are accepted too).
    """
    with open(path) as f:
        raw = json.load(f)

    lat = raw.get("latitude", raw.get("lat"))
    lon = raw.get("longitude", raw.get("lon", raw.get("lng")))
    if lat is None or lon is None:
        raise FacilityFileError(path, ["home base needs latitude and longitude"])
    return GeoPoint(float(lat), float(lon), id="home")


def facilities_to_points(df: pd.DataFrame) -> List[GeoPoint]:
    return [
        GeoPoint(float(r.latitude), float(r.longitude), id=r.facility_id)
        for r in df.itertuples(index=False)
    ]
