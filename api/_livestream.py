"""
Request flow shared by the Vercel function and the local Flask blueprint.

Returns { state, videoId, upcomingStartMs, generatedAt, youtubeFetchedAt }
plus the status code and Cache-Control value to send with it.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone

from api._helpers import ConfigurationError, cache_control, fetch_json, load_config
from api._selector import NO_STATE, cache_seconds, select_state_with_rule
from api._youtube import UPLOADS_PLAYLIST_CACHE, fetch_live_metadata, resolve_recent_video_ids

CONFIG_ERROR_CACHE_SECONDS = 60
FAILURE_CACHE_SECONDS = 60


@dataclass(frozen=True)
class LivestreamResponse:
    status: int
    body: dict
    cache_control: str


def _now_ms() -> int:
    return int(time.time() * 1000)


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def build_livestream_response(debug: bool = False, now_ms: int | None = None, env=None,
                              fetch=fetch_json, cache=UPLOADS_PLAYLIST_CACHE) -> LivestreamResponse:
    generated_ms = _now_ms() if now_ms is None else now_ms

    try:
        config = load_config(env)
    except ConfigurationError as e:
        print(f"[livestream] ERROR: {e}")
        body = {"error": str(e), **NO_STATE.to_dict()}
        return LivestreamResponse(500, body, cache_control(CONFIG_ERROR_CACHE_SECONDS))

    try:
        video_ids = resolve_recent_video_ids(
            config.channel_id, config.api_key,
            limit=config.uploads_limit, cache=cache, fetch=fetch,
        )
        candidates = fetch_live_metadata(video_ids, config.api_key, fetch=fetch)
        fetched_ms = _now_ms() if now_ms is None else now_ms
    except Exception as e:
        print(f"[livestream] Upstream error: {e}")
        body = {
            **NO_STATE.to_dict(),
            "generatedAt": _iso(generated_ms),
            "youtubeFetchedAt": None,
        }
        if debug:
            body["debugError"] = str(e)
            return LivestreamResponse(200, body, cache_control(None))
        return LivestreamResponse(200, body, cache_control(FAILURE_CACHE_SECONDS))

    result, rule = select_state_with_rule(candidates, fetched_ms, config.grace_ms)
    seconds = cache_seconds(result, fetched_ms)
    print(f"[livestream] {result.state} via {rule} video={result.video_id} "
          f"candidates={len(candidates)} cache={seconds}s")

    body = {
        **result.to_dict(),
        "generatedAt": _iso(generated_ms),
        "youtubeFetchedAt": _iso(fetched_ms),
    }
    return LivestreamResponse(200, body, cache_control(seconds))
