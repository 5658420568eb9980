from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the only outbound call in the service is one GET per
rate refresh, so a full client library is not warranted. Focus: GET JSON
with a hard per-attempt timeout and limited retries.
"""
import http.client
import json
import logging
import time
import urllib.parse
import urllib.request
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("app.http")

USER_AGENT = "travel-desk-currency/0.1"


class HttpError(Exception):
    pass


def build_url(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    if not params:
        return url
    sep = "&" if urllib.parse.urlparse(url).query else "?"
    return url + sep + urllib.parse.urlencode(params)


def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
) -> Dict[str, Any]:
    full_url = build_url(url, params)
    # never log the query string, it carries the API key
    safe_url = url
    req = urllib.request.Request(
        full_url, headers={"Accept": "application/json", "User-Agent": USER_AGENT}
    )
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {safe_url}")
                data = json.loads(resp.read().decode("utf-8"))
                if not isinstance(data, dict):
                    raise HttpError(f"expected a JSON object from {safe_url}")
                return data
        except (
            OSError,
            http.client.HTTPException,
            HttpError,
            ValueError,
        ) as e:  # OSError: URLError, timeouts, dropped connections. ValueError: JSON decode
            last_err = e
            logger.debug(
                "GET %s failed (attempt %d/%d): %s",
                safe_url,
                attempt + 1,
                retries + 1,
                e,
            )
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {safe_url}: {last_err}")
