"""
Flask routes over the aggregation pipeline.

  GET /                                   -> landing page
  GET /api/github/<username>              -> StatsRecord JSON
  GET /api/github/<username>/card.svg     -> share card (?theme=&layout=)
  GET /api/github/<username>/presentation -> scene timeline (?frame=)
  GET /healthz                            -> liveness + config summary
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify, render_template, request

from .aggregator import Aggregator
from .card import LAYOUTS, CardError, card_context, resolve_style, theme_names
from .config import Settings
from .github import GitHubAPIError, NotFound
from .presentation import SCENE_DURATION, TOTAL_FRAMES, build_timeline, progress, scene_at, scene_opacity
from .stats import StatsRecord

logger = logging.getLogger(__name__)

# GitHub allows alnum and hyphen; max length 39
USERNAME_RE = re.compile(r"^[A-Za-z0-9-]{1,39}$")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET",
    "Cache-Control": "public, s-maxage=300, stale-while-revalidate=600",
}


def create_app(settings: Optional[Settings] = None, aggregator: Optional[Aggregator] = None) -> Flask:
    settings = settings or Settings.from_env()
    aggregator = aggregator or Aggregator.from_settings(settings)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["aggregator"] = aggregator

    def _error(msg: str, status: int) -> Tuple[Response, int]:
        return jsonify({"error": msg}), status

    def _load(username: str) -> Tuple[Optional[StatsRecord], Optional[Tuple[Response, int]]]:
        if not USERNAME_RE.match(username or ""):
            return None, _error("Invalid username format", 400)
        try:
            return aggregator.aggregate(username), None
        except NotFound as e:
            return None, _error(str(e), 404)
        except GitHubAPIError as e:
            logger.error("GitHub API error for %s: %s", username, e)
            return None, _error(str(e), 502)
        except Exception:
            logger.exception("Unexpected error while aggregating %s", username)
            return None, _error("Failed to fetch GitHub data", 500)

    @app.route("/", methods=["GET"])
    def home():
        return render_template("index.html", themes=theme_names(), layouts=list(LAYOUTS))

    @app.route("/api/github/", methods=["GET"])
    def missing_username():
        return _error("Username is required", 400)

    @app.route("/api/github/<username>", methods=["GET"])
    def api_github(username: str):
        record, err = _load(username)
        if err:
            return err
        resp = jsonify(record.to_dict())
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.route("/api/github/<username>/card.svg", methods=["GET"])
    def api_card(username: str):
        theme = request.args.get("theme") or None
        layout = request.args.get("layout") or None
        try:
            theme, layout = resolve_style(theme, layout)
        except CardError as e:
            return _error(str(e), 400)
        record, err = _load(username)
        if err:
            return err
        ctx = card_context(record, theme, layout)
        svg = render_template(ctx.pop("template"), **ctx)
        resp = Response(svg, mimetype="image/svg+xml")
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.route("/api/github/<username>/presentation", methods=["GET"])
    def api_presentation(username: str):
        frame_arg = request.args.get("frame")
        frame: Optional[int] = None
        if frame_arg is not None:
            try:
                frame = int(frame_arg)
            except ValueError:
                return _error("frame must be an integer", 400)
            if not 0 <= frame < TOTAL_FRAMES:
                return _error(f"frame must be between 0 and {TOTAL_FRAMES - 1}", 400)
        record, err = _load(username)
        if err:
            return err
        payload: Dict[str, Any] = build_timeline(record)
        if frame is not None:
            payload["playhead"] = {
                "frame": frame,
                "scene": scene_at(frame),
                "opacity": scene_opacity(frame % SCENE_DURATION),
                "progress": progress(frame),
            }
        resp = jsonify(payload)
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.route("/healthz", methods=["GET"])
    def healthz():
        return jsonify(
            {
                "ok": True,
                "token_configured": bool(settings.github_token),
                "cache_ttl_seconds": settings.cache_ttl_seconds,
                "cache_entries": len(aggregator.cache),
            }
        )

    return app
