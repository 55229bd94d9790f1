"""
Bug Gang Scheduler API
----------------------
JSON API over the task store: list/board projections, add, move, complete,
drag and delete. Every mutation is written through to SQLite.

Usage:
    buggang serve --port 3000

API:
    GET    /api/tasks?view=list|board   → projection of the current (or given) view
    POST   /api/tasks                   → { title }                      201 | 400
    POST   /api/tasks/<id>/status       → { status }                     200 | 400 | 404
    POST   /api/tasks/<id>/complete                                      200 | 404
    POST   /api/tasks/<id>/drag         → { dx }                         200 | 400 | 404 | 409
    DELETE /api/tasks/<id>                                               200 | 404
    POST   /api/view                    → { mode: "list"|"board" }
    GET    /api/stats                   → counts per status (from the database)
    GET    /health

Mutating routes require X-API-Key when api_secret is configured.
"""
import hmac
import logging
import math
from functools import wraps
from typing import Optional

from flask import Flask, current_app, jsonify, request

from .adapter import SQLiteTaskAdapter
from .config import Config
from .errors import ValidationError
from .events import SyncResult, TaskSyncBridge
from .gestures import ORIGIN
from .schema import TaskStatus
from .store import TaskStore
from .views import TaskViewController, ViewMode

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, adapter: Optional[SQLiteTaskAdapter] = None) -> Flask:
    """Build the app around an adapter. The caller owns the adapter's lifecycle."""
    config = config or Config().resolve()
    if adapter is None:
        adapter = SQLiteTaskAdapter(config.db_path)
    if not adapter.is_ready:
        adapter.initialize()

    bridge = TaskSyncBridge(TaskStore(), adapter, drag_threshold=config.drag_threshold)
    bridge.load()
    views = TaskViewController(bridge.store, ViewMode.from_str(config.default_view))

    app = Flask(__name__)
    app.config["BUGGANG"] = config
    app.extensions["buggang"] = {"adapter": adapter, "bridge": bridge, "views": views}
    _register_routes(app)
    return app


def _bridge() -> TaskSyncBridge:
    return current_app.extensions["buggang"]["bridge"]


def _views() -> TaskViewController:
    return current_app.extensions["buggang"]["views"]


# ── Auth ─────────────────────────────────────────────────────────────────────

def require_api_key(f):
    """Decorator: reject requests without a valid X-API-Key header when a secret is set."""
    @wraps(f)
    def decorated(*args, **kwargs):
        secret = current_app.config["BUGGANG"].api_secret
        if not secret:
            return f(*args, **kwargs)
        provided = request.headers.get("X-API-Key", "").strip()
        if not hmac.compare_digest(provided, secret):
            code = 401 if not provided else 403
            return jsonify({"error": "Unauthorized"}), code
        return f(*args, **kwargs)
    return decorated


def _json_body():
    """The request body as a JSON object, or None when it is anything else."""
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _bad_body():
    return jsonify({"error": "Request body must be a JSON object"}), 400


def _result_json(result: SyncResult, **extra):
    body = {"task": result.task.to_dict(), "persisted": result.persisted, "changed": result.changed}
    body.update(extra)
    return jsonify(body)


# ── Routes ───────────────────────────────────────────────────────────────────

def _register_routes(app: Flask) -> None:

    @app.route("/api/tasks", methods=["GET"])
    def api_tasks():
        view = request.args.get("view")
        try:
            mode = ViewMode.from_str(view) if view else None
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(_views().to_dict(mode))

    @app.route("/api/tasks", methods=["POST"])
    @require_api_key
    def api_add_task():
        data = _json_body()
        if data is None:
            return _bad_body()
        try:
            title = data.get("title")
            if title is not None and not isinstance(title, str):
                raise ValidationError("Task title must be a string")
            result = _bridge().add_task(title)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        return _result_json(result), 201

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"])
    @require_api_key
    def api_set_status(task_id):
        data = _json_body()
        if data is None:
            return _bad_body()
        try:
            status = TaskStatus.from_str(data.get("status", ""))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        result = _bridge().move_task(task_id, status)
        if not result.found:
            return jsonify({"error": "Task not found"}), 404
        return _result_json(result)

    @app.route("/api/tasks/<int:task_id>/complete", methods=["POST"])
    @require_api_key
    def api_complete(task_id):
        result = _bridge().complete_task(task_id)
        if not result.found:
            return jsonify({"error": "Task not found"}), 404
        return _result_json(result)

    @app.route("/api/tasks/<int:task_id>/drag", methods=["POST"])
    @require_api_key
    def api_drag(task_id):
        if not _views().drag_enabled:
            return jsonify({"error": "Dragging is only available in board view"}), 409
        data = _json_body()
        if data is None:
            return _bad_body()
        try:
            dx = float(data.get("dx", 0))
        except (TypeError, ValueError):
            return jsonify({"error": "dx must be a number"}), 400
        if not math.isfinite(dx):
            return jsonify({"error": "dx must be a finite number"}), 400
        result = _bridge().drag_task(task_id, dx)
        if not result.found:
            return jsonify({"error": "Task not found"}), 404
        return _result_json(result, transitioned=result.changed, offset=list(ORIGIN))

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"])
    @require_api_key
    def api_delete(task_id):
        result = _bridge().delete_task(task_id)
        if not result.found:
            return jsonify({"error": "Task not found"}), 404
        return _result_json(result)

    @app.route("/api/view", methods=["POST"])
    def api_set_view():
        data = _json_body()
        if data is None:
            return _bad_body()
        try:
            mode = ViewMode.from_str(data.get("mode", ""))
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        _views().set_mode(mode)
        return jsonify({"view": mode.value})

    @app.route("/api/stats")
    def api_stats():
        counts = current_app.extensions["buggang"]["adapter"].count_by_status()
        return jsonify({
            "total": sum(counts.values()),
            "by_status": {status.value: n for status, n in counts.items()},
        })

    @app.route("/health")
    def health():
        adapter = current_app.extensions["buggang"]["adapter"]
        return jsonify({"status": "ok", "db": adapter.db_path, "view": _views().mode.value})
