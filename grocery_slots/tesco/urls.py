# File: tesco/urls.py
from __future__ import annotations

import re
from urllib.parse import urlencode

# ── Fixed endpoints ─────────────────────────────────────────────────────────
DELIVERY_URL = "https://www.tesco.com/groceries/en-GB/slots/delivery"
COLLECTION_URL = "https://www.tesco.com/groceries/en-GB/slots/collection"
LOGIN_URL = "https://secure.tesco.com/account/en-GB/login"

LOCATION_ID_PATTERN = re.compile(r"locationId=(\d+)")


def login_url_for(target_url: str) -> str:
    """Return the login URL that redirects to ``target_url`` after sign-in."""

    return f"{LOGIN_URL}?{urlencode({'from': target_url})}"


def is_login_url(url: str) -> bool:
    return (url or "").startswith(LOGIN_URL)


def extract_location_id(url: str) -> str | None:
    match = LOCATION_ID_PATTERN.search(url or "")
    return match.group(1) if match else None


def rewrite_location_id(url: str, location_id: str) -> str:
    """Point a date-window URL at another location; the rest of the URL is untouched."""

    if not str(location_id).isdigit():
        raise ValueError(f"location id must be numeric; got {location_id!r}")
    return LOCATION_ID_PATTERN.sub(f"locationId={location_id}", url, count=1)
