"""Client for ESPN's public NBA scoreboard API."""

from datetime import date

import requests

BASE_URL = "https://site.api.espn.com/apis/site/v2/sports/basketball/nba"

_HEADERS = {"User-Agent": "dumphoops/0.1"}


def _get(path: str, params: dict | None = None) -> dict:
    """Make a GET request to the ESPN API."""
    resp = requests.get(f"{BASE_URL}{path}", params=params, headers=_HEADERS, timeout=30)
    resp.raise_for_status()
    return resp.json()


def get_scoreboard(d: date) -> dict:
    """Get the scoreboard (all games) for a date."""
    return _get("/scoreboard", params={"dates": d.strftime("%Y%m%d")})
