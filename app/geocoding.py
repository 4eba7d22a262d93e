# app/geocoding.py
"""Mapbox forward-geocoding client."""
from typing import Any, Dict, List
from urllib.parse import quote

import httpx


class GeocodingError(Exception):
    pass


class MapboxGeocoder:
    def __init__(self, access_token: str, base_url: str = "https://api.mapbox.com",
                 client: httpx.Client | None = None):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client()

    def forward_geocode(self, query: str, limit: int = 1) -> List[Dict[str, Any]]:
        """Return the provider's features for `query`, best match first."""
        if not self.access_token:
            raise GeocodingError("MAP_TOKEN not set")
        url = f"{self.base_url}/geocoding/v5/mapbox.places/{quote(query, safe='')}.json"
        try:
            resp = self._client.get(url, params={"access_token": self.access_token, "limit": limit})
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeocodingError(str(e)) from e
        features = body.get("features") if isinstance(body, dict) else None
        if not isinstance(features, list):
            raise GeocodingError("malformed geocoding response")
        return features[:limit]

    def close(self):
        self._client.close()
