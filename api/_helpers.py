"""
Shared helpers for the livestream serverless function.

Upstream: YouTube Data API v3 (https://www.googleapis.com/youtube/v3)
Auth: API key passed as the `key` query param

Docs: https://developers.google.com/youtube/v3/docs
"""

import json
import os
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse, parse_qs

import requests

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
REQUEST_TIMEOUT = 30

DEFAULT_GRACE_MINUTES = 10
DEFAULT_UPLOADS_LIMIT = 20
MAX_UPLOADS_LIMIT = 50

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
STALE_WHILE_REVALIDATE = 30


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class LivestreamError(Exception):
    """Base class for failures while computing the livestream state."""


class ConfigurationError(LivestreamError):
    """Required environment (API key, channel id) is missing."""


class ResolutionError(LivestreamError):
    """The channel lookup returned no uploads playlist id."""


class FetchError(LivestreamError):
    """An upstream call returned a non-200 status or an unparseable body."""

    def __init__(self, status: int | None, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status} :: {message}")


@dataclass(frozen=True)
class LivestreamConfig:
    api_key: str
    channel_id: str
    grace_minutes: int = DEFAULT_GRACE_MINUTES
    uploads_limit: int = DEFAULT_UPLOADS_LIMIT

    @property
    def grace_ms(self) -> int:
        return self.grace_minutes * 60 * 1000


def _int_override(env, name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        print(f"[livestream] WARNING: ignoring non-integer {name}={raw!r}")
        return default
    if value < 0:
        print(f"[livestream] WARNING: ignoring negative {name}={raw!r}")
        return default
    return value


def load_config(env=None) -> LivestreamConfig:
    """Read the function's settings from the environment.

    Raises ConfigurationError when the API key or channel id is missing.
    """
    env = os.environ if env is None else env
    api_key = (env.get("YT_API_KEY") or "").strip()
    channel_id = (env.get("YT_CHANNEL_ID") or "").strip()
    if not api_key or not channel_id:
        raise ConfigurationError("Missing env vars")

    limit = _int_override(env, "YT_UPLOADS_LIMIT", DEFAULT_UPLOADS_LIMIT)
    return LivestreamConfig(
        api_key=api_key,
        channel_id=channel_id,
        grace_minutes=_int_override(env, "YT_GRACE_MINUTES", DEFAULT_GRACE_MINUTES),
        uploads_limit=min(max(limit, 1), MAX_UPLOADS_LIMIT),
    )


# ---------------------------------------------------------------------------
# Fetchers
# ---------------------------------------------------------------------------
def fetch_json(path: str, params: dict):
    """GET a YouTube Data API resource and return the decoded JSON body.

    Raises FetchError on any non-200 status or a body that is not JSON.
    """
    url = f"{YOUTUBE_API_BASE}{path}"
    resp = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
    if resp.status_code != 200:
        raise FetchError(resp.status_code, resp.text[:500])
    try:
        return resp.json()
    except ValueError:
        raise FetchError(resp.status_code, f"Invalid JSON from {path}: {resp.text[:200]}")


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------
def cache_control(seconds: int | None) -> str:
    """Edge cache directive; None means the response must not be cached."""
    if seconds is None:
        return "no-store"
    return f"s-maxage={seconds}, stale-while-revalidate={STALE_WHILE_REVALIDATE}"


def send_cors_headers(handler: BaseHTTPRequestHandler):
    for name, value in CORS_HEADERS.items():
        handler.send_header(name, value)


def send_json(handler: BaseHTTPRequestHandler, data: dict, status: int = 200,
              cache: str = "no-store"):
    """Send a JSON response with CORS and Cache-Control headers."""
    body = json.dumps(data)
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Cache-Control", cache)
    send_cors_headers(handler)
    handler.end_headers()
    handler.wfile.write(body.encode())


def send_preflight(handler: BaseHTTPRequestHandler):
    handler.send_response(204)
    send_cors_headers(handler)
    handler.end_headers()


def get_query_params(handler: BaseHTTPRequestHandler) -> dict:
    """Parse query string params from the request URL."""
    parsed = urlparse(handler.path)
    return {k: v[0] for k, v in parse_qs(parsed.query).items()}
