"""URL and header helpers shared by the client and transports"""

from typing import Mapping
from urllib.parse import quote, urlencode

DEFAULT_BASE_URL = "https://api.akahu.io/v1"

AKAHU_ID_HEADER = "X-Akahu-Id"
AUTHORIZATION_HEADER = "Authorization"
ACCEPT_HEADER = "Accept"
JSON_MEDIA_TYPE = "application/json"


def build_url(base_url: str, path: str, params: Mapping[str, str] | None = None) -> str:
    """Join base URL and path, appending percent-encoded query parameters"""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    if params:
        url = f"{url}?{urlencode(params, quote_via=quote)}"
    return url


def path_segment(value: str) -> str:
    """Percent-encode a value for use as one path segment"""
    return quote(value, safe="")
