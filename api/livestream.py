"""GET /api/livestream -- Current livestream state of the configured channel.

GET /api/livestream[?debug=1]
Returns { state: "live"|"upcoming"|"replay"|"none", videoId, upcomingStartMs,
          generatedAt, youtubeFetchedAt }

Cached at the edge (s-maxage) to protect the YouTube quota.
"""

from http.server import BaseHTTPRequestHandler

from api._helpers import get_query_params, send_json, send_preflight
from api._livestream import build_livestream_response


class handler(BaseHTTPRequestHandler):
    def do_OPTIONS(self):
        send_preflight(self)

    def do_GET(self):
        params = get_query_params(self)
        debug = params.get("debug", "") == "1"

        resp = build_livestream_response(debug=debug)
        send_json(self, resp.body, resp.status, cache=resp.cache_control)
