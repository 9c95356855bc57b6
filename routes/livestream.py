"""
Livestream state route for local development.

Blueprint prefix: /api
Mirrors the Vercel function in api/livestream.py.
"""

from flask import Blueprint, jsonify, make_response, request

from api._helpers import CORS_HEADERS
from api._livestream import build_livestream_response

livestream_bp = Blueprint("livestream", __name__, url_prefix="/api")


def _with_cors(resp):
    for name, value in CORS_HEADERS.items():
        resp.headers[name] = value
    return resp


@livestream_bp.route("/livestream", methods=["GET", "OPTIONS"])
def livestream():
    """Same payload and headers as the deployed function."""
    if request.method == "OPTIONS":
        return _with_cors(make_response("", 204))

    debug = request.args.get("debug", "") == "1"
    result = build_livestream_response(debug=debug)
    resp = jsonify(result.body)
    resp.status_code = result.status
    resp.headers["Cache-Control"] = result.cache_control
    return _with_cors(resp)
