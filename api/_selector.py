"""
Livestream state selection.

Given recent uploads enriched with liveStreamingDetails, pick exactly one of
live / upcoming / replay / none and derive how long the edge may cache it.

Rules run in order and the first one that picks a video wins:

    live            started and not ended (first in upload order)
    upcoming_grace  scheduled start passed within the grace window, not yet
                    started (latest due time)
    upcoming        scheduled in the future, not ended (soonest)
    replay          ended (latest end time)

The grace rule sits ahead of the future rule so a broadcast that is running a
few minutes late is not skipped in favour of next week's.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

LIVE = "live"
UPCOMING = "upcoming"
REPLAY = "replay"
NONE = "none"

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS

LIVE_CACHE_SECONDS = 30
GRACE_CACHE_SECONDS = 5
SOON_CACHE_SECONDS = 30
NEAR_CACHE_SECONDS = 300
FAR_CACHE_SECONDS = 1800
IDLE_CACHE_SECONDS = 600


@dataclass(frozen=True)
class VideoCandidate:
    id: str
    scheduled_start_time: str | None = None
    actual_start_time: str | None = None
    actual_end_time: str | None = None

    @classmethod
    def from_api(cls, item: dict) -> "VideoCandidate":
        """Build from a videos.list item (part=liveStreamingDetails)."""
        details = item.get("liveStreamingDetails") or {}
        return cls(
            id=item["id"],
            scheduled_start_time=details.get("scheduledStartTime") or None,
            actual_start_time=details.get("actualStartTime") or None,
            actual_end_time=details.get("actualEndTime") or None,
        )

    @property
    def started(self) -> bool:
        return bool(self.actual_start_time)

    @property
    def ended(self) -> bool:
        return bool(self.actual_end_time)


@dataclass(frozen=True)
class StateResult:
    state: str
    video_id: str | None = None
    upcoming_start_ms: int | None = None

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "videoId": self.video_id,
            "upcomingStartMs": self.upcoming_start_ms,
        }


NO_STATE = StateResult(NONE)


def parse_timestamp_ms(value) -> int | None:
    """ISO-8601 timestamp -> epoch milliseconds, or None if unparseable."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
def pick_live(candidates, now_ms: int, grace_ms: int):
    for c in candidates:
        if c.started and not c.ended:
            return StateResult(LIVE, c.id)
    return None


def pick_upcoming_grace(candidates, now_ms: int, grace_ms: int):
    best, best_start = None, None
    for c in candidates:
        if c.started or c.ended:
            continue
        start = parse_timestamp_ms(c.scheduled_start_time)
        if start is None or start > now_ms or now_ms - start > grace_ms:
            continue
        if best_start is None or start > best_start:
            best, best_start = c, start
    if best is None:
        return None
    return StateResult(UPCOMING, best.id, best_start)


def pick_upcoming(candidates, now_ms: int, grace_ms: int):
    best, best_start = None, None
    for c in candidates:
        if c.ended:
            continue
        start = parse_timestamp_ms(c.scheduled_start_time)
        if start is None or start <= now_ms:
            continue
        if best_start is None or start < best_start:
            best, best_start = c, start
    if best is None:
        return None
    return StateResult(UPCOMING, best.id, best_start)


def pick_replay(candidates, now_ms: int, grace_ms: int):
    # Unparseable end times rank below every parseable one.
    best, best_key = None, None
    for c in candidates:
        if not c.ended:
            continue
        end = parse_timestamp_ms(c.actual_end_time)
        key = (0, 0) if end is None else (1, end)
        if best_key is None or key > best_key:
            best, best_key = c, key
    if best is None:
        return None
    return StateResult(REPLAY, best.id)


RULES = (
    ("live", pick_live),
    ("upcoming_grace", pick_upcoming_grace),
    ("upcoming", pick_upcoming),
    ("replay", pick_replay),
)


def select_state_with_rule(candidates, now_ms: int, grace_ms: int, rules=RULES):
    """Like select_state, but also returns the name of the rule that matched."""
    candidates = list(candidates)
    for name, rule in rules:
        result = rule(candidates, now_ms, grace_ms)
        if result is not None:
            return result, name
    return NO_STATE, NONE


def select_state(candidates, now_ms: int, grace_ms: int) -> StateResult:
    return select_state_with_rule(candidates, now_ms, grace_ms)[0]


# ---------------------------------------------------------------------------
# Cache lifetime
# ---------------------------------------------------------------------------
def cache_seconds(result: StateResult, now_ms: int) -> int:
    """Edge cache lifetime for a result; shorter the sooner it may change."""
    if result.state == LIVE:
        return LIVE_CACHE_SECONDS
    if result.state != UPCOMING or result.upcoming_start_ms is None:
        return IDLE_CACHE_SECONDS

    until_start = result.upcoming_start_ms - now_ms
    if until_start <= 0:
        return GRACE_CACHE_SECONDS
    if until_start > 2 * HOUR_MS:
        return FAR_CACHE_SECONDS
    if until_start > 30 * MINUTE_MS:
        return NEAR_CACHE_SECONDS
    return SOON_CACHE_SECONDS
