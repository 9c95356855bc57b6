"""
YouTube lookups for the livestream function.

channels.list -> uploads playlist id (memoized per warm process)
playlistItems.list -> recent video ids, newest first
videos.list -> liveStreamingDetails for those ids
"""

from api._helpers import (
    DEFAULT_UPLOADS_LIMIT, MAX_UPLOADS_LIMIT, ResolutionError, fetch_json,
)
from api._selector import VideoCandidate


class SingleSlotCache:
    """Holds one (key, value) pair for the life of the process.

    get_or_compute only calls `compute` when the slot is empty or holds a
    different key. Two requests racing on an empty slot both compute and both
    write the same value, so there is no lock.
    """

    def __init__(self):
        self._key = None
        self._value = None

    def peek(self, key):
        if self._key == key:
            return self._value
        return None

    def get_or_compute(self, key, compute):
        value = self.peek(key)
        if value is not None:
            return value
        value = compute()
        if value is not None:
            self._key, self._value = key, value
        return value

    def reset(self):
        self._key = None
        self._value = None


UPLOADS_PLAYLIST_CACHE = SingleSlotCache()


def resolve_uploads_playlist(channel_id: str, api_key: str, fetch=fetch_json) -> str:
    """Look up the channel's uploads playlist id."""
    data = fetch("/channels", {
        "part": "contentDetails",
        "id": channel_id,
        "key": api_key,
    })
    items = (data or {}).get("items") or []
    playlist_id = None
    if items and isinstance(items[0], dict):
        playlist_id = (
            ((items[0].get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
        )
    if not playlist_id:
        raise ResolutionError(f"No uploads playlist for channel {channel_id}")
    return playlist_id


def list_playlist_video_ids(playlist_id: str, api_key: str,
                            limit: int = DEFAULT_UPLOADS_LIMIT, fetch=fetch_json) -> list:
    """Most recent video ids in a playlist, newest first."""
    limit = min(max(limit, 1), MAX_UPLOADS_LIMIT)
    data = fetch("/playlistItems", {
        "part": "contentDetails",
        "playlistId": playlist_id,
        "maxResults": limit,
        "key": api_key,
    })
    ids = []
    for item in (data or {}).get("items") or []:
        if not isinstance(item, dict):
            continue
        video_id = (item.get("contentDetails") or {}).get("videoId")
        if isinstance(video_id, str) and video_id.strip():
            ids.append(video_id.strip())
    return ids[:limit]


def resolve_recent_video_ids(channel_id: str, api_key: str,
                             limit: int = DEFAULT_UPLOADS_LIMIT,
                             cache: SingleSlotCache = UPLOADS_PLAYLIST_CACHE,
                             fetch=fetch_json) -> list:
    playlist_id = cache.get_or_compute(
        channel_id,
        lambda: resolve_uploads_playlist(channel_id, api_key, fetch=fetch),
    )
    return list_playlist_video_ids(playlist_id, api_key, limit=limit, fetch=fetch)


def fetch_live_metadata(video_ids, api_key: str, fetch=fetch_json) -> list:
    """Enrich video ids with liveStreamingDetails, keeping the order given."""
    video_ids = list(video_ids)
    if not video_ids:
        return []
    data = fetch("/videos", {
        "part": "liveStreamingDetails",
        "id": ",".join(video_ids),
        "maxResults": len(video_ids),
        "key": api_key,
    })
    by_id = {}
    for item in (data or {}).get("items") or []:
        if isinstance(item, dict) and isinstance(item.get("id"), str):
            by_id[item["id"]] = VideoCandidate.from_api(item)
    return [by_id[v] for v in video_ids if v in by_id]
