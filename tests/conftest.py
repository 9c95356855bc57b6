from datetime import datetime, timezone

import pytest

from api._helpers import FetchError
from api._youtube import SingleSlotCache

NOW_MS = int(datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc).timestamp() * 1000)
MINUTE_MS = 60 * 1000


def iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class FakeYouTube:
    """Stands in for fetch_json; answers from canned channel/playlist/video data."""

    def __init__(self, uploads="UUabc", playlist_ids=(), videos=(), fail_on=None):
        self.uploads = uploads
        self.playlist_ids = list(playlist_ids)
        self.videos = list(videos)
        self.fail_on = fail_on
        self.calls = []

    def __call__(self, path, params):
        self.calls.append((path, dict(params)))
        if path == self.fail_on:
            raise FetchError(403, "quotaExceeded")
        if path == "/channels":
            if not self.uploads:
                return {"items": []}
            return {"items": [{"contentDetails": {"relatedPlaylists": {"uploads": self.uploads}}}]}
        if path == "/playlistItems":
            return {"items": [{"contentDetails": {"videoId": v}} for v in self.playlist_ids]}
        if path == "/videos":
            wanted = params["id"].split(",")
            return {"items": [v for v in self.videos if v["id"] in wanted]}
        raise AssertionError(f"unexpected path {path}")

    def paths(self):
        return [p for p, _ in self.calls]


def video(video_id, scheduled=None, started=None, ended=None):
    details = {}
    if scheduled is not None:
        details["scheduledStartTime"] = iso(scheduled)
    if started is not None:
        details["actualStartTime"] = iso(started)
    if ended is not None:
        details["actualEndTime"] = iso(ended)
    item = {"id": video_id}
    if details:
        item["liveStreamingDetails"] = details
    return item


@pytest.fixture
def cache():
    return SingleSlotCache()


@pytest.fixture
def env():
    return {"YT_API_KEY": "test-key", "YT_CHANNEL_ID": "UCabc"}
