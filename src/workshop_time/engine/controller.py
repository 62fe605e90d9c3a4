from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Callable

from flask import Flask, jsonify, request

from ..common.datetime_utils import day_bounds, parse_iso_date, resolve_period
from ..common.validators import optional_text, require_positive_id
from ..core.enums import ClockMethod, ErrorKind, IdentifierKind
from ..core.exceptions import InfrastructureError, NotFoundError, ValidationError
from ..container import Container
from ..intervals.model import CategoryTarget, OrderTarget, parse_target
from ..productivity.model import TeamRanking
from .result import OperationResult

_STATUS_BY_KIND = {
    ErrorKind.ALREADY_PRESENT: 409,
    ErrorKind.NOT_PRESENT: 409,
    ErrorKind.ACTIVE_SUB_ACTIVITY: 409,
    ErrorKind.ALREADY_ON_BREAK: 409,
    ErrorKind.ALREADY_WORKING: 409,
    ErrorKind.NO_ACTIVE_BREAK: 409,
    ErrorKind.NO_ACTIVE_WORK: 409,
    ErrorKind.INVALID_INTERVAL: 400,
    ErrorKind.UNKNOWN_TARGET: 400,
    ErrorKind.BUSY: 503,
    ErrorKind.STORE_FAILURE: 500,
}


def to_json(value: Any) -> Any:
    """Convert engine states (dataclasses, enums, datetimes) to JSON-able values."""
    if isinstance(value, TeamRanking):
        return {"entries": to_json(value.entries), "team_average": value.team_average}
    if isinstance(value, OrderTarget):
        return {"type": "order", "order_id": value.order_id}
    if isinstance(value, CategoryTarget):
        return {"type": "category", "category_id": value.category_id}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    return value


def respond(result: OperationResult, *, created: bool = False):
    if result.ok:
        return jsonify(result.to_dict(to_json)), 201 if created else 200
    return jsonify(result.to_dict()), _STATUS_BY_KIND.get(result.error_kind, 500)


def _bad_request(message: str):
    return jsonify({"ok": False, "errorKind": "InvalidRequest", "message": message}), 400


def _window_from_args(args, *, today: date, default_period: str = "week") -> tuple[datetime, datetime]:
    period = args.get("period")
    if period:
        return resolve_period(period, today)
    start = args.get("start")
    end = args.get("end") or start
    if not start:
        return resolve_period(default_period, today)
    return day_bounds(parse_iso_date(start), parse_iso_date(end))


def register(app: Flask, container: Container) -> None:
    engine = container.engine

    def json_endpoint(view: Callable):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return _bad_request(str(e))

        return wrapper

    def body() -> dict:
        payload = request.get_json(silent=True)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValidationError("JSON body must be an object")
        return payload

    def run_action(employee_id: int, action: str, payload: dict, method: ClockMethod):
        note = optional_text(payload.get("note"))
        if action == "clock-in":
            return respond(
                engine.clock_in(employee_id, location=optional_text(payload.get("location")), note=note, method=method),
                created=True,
            )
        if action == "clock-out":
            return respond(engine.clock_out(employee_id, location=optional_text(payload.get("location")), note=note))
        if action == "break-start":
            category_id = require_positive_id(payload.get("category_id"), "category_id")
            return respond(engine.start_break(employee_id, category_id, note=note, method=method), created=True)
        if action == "break-stop":
            return respond(engine.stop_break(employee_id, note=note))
        if action == "work-start":
            target = parse_target(payload.get("order_id"), payload.get("category_id"))
            return respond(
                engine.start_work(
                    employee_id,
                    target,
                    task_description=optional_text(payload.get("task_description")),
                    method=method,
                ),
                created=True,
            )
        if action == "work-stop":
            return respond(engine.stop_work(employee_id, note=note))
        if action == "status":
            return respond(engine.current_status(employee_id))
        if action == "today":
            return respond(engine.timeline(employee_id, *resolve_period("today", engine.today())))
        return _bad_request(f"Unknown action: {action}")

    @app.route("/api/employees/<int:employee_id>/clock-in", methods=["POST"], endpoint="api_clock_in")
    @json_endpoint
    def clock_in(employee_id: int):
        return run_action(employee_id, "clock-in", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/clock-out", methods=["POST"], endpoint="api_clock_out")
    @json_endpoint
    def clock_out(employee_id: int):
        return run_action(employee_id, "clock-out", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/breaks/start", methods=["POST"], endpoint="api_break_start")
    @json_endpoint
    def break_start(employee_id: int):
        return run_action(employee_id, "break-start", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/breaks/stop", methods=["POST"], endpoint="api_break_stop")
    @json_endpoint
    def break_stop(employee_id: int):
        return run_action(employee_id, "break-stop", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/work/start", methods=["POST"], endpoint="api_work_start")
    @json_endpoint
    def work_start(employee_id: int):
        return run_action(employee_id, "work-start", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/work/stop", methods=["POST"], endpoint="api_work_stop")
    @json_endpoint
    def work_stop(employee_id: int):
        return run_action(employee_id, "work-stop", body(), ClockMethod.WEB)

    @app.route("/api/employees/<int:employee_id>/status", methods=["GET"], endpoint="api_status")
    def status(employee_id: int):
        return respond(engine.current_status(employee_id))

    @app.route("/api/employees/<int:employee_id>/metrics", methods=["GET"], endpoint="api_metrics")
    @json_endpoint
    def metrics(employee_id: int):
        if request.args.get("period") or not request.args.get("start"):
            return respond(engine.period_metrics(employee_id, request.args.get("period") or "week"))
        window_start, window_end = _window_from_args(request.args, today=engine.today())
        return respond(engine.window_metrics(employee_id, window_start, window_end))

    @app.route("/api/employees/<int:employee_id>/timeline", methods=["GET"], endpoint="api_timeline")
    @json_endpoint
    def timeline(employee_id: int):
        window_start, window_end = _window_from_args(request.args, today=engine.today(), default_period="today")
        return respond(engine.timeline(employee_id, window_start, window_end))

    @app.route("/api/live-board", methods=["GET"], endpoint="api_live_board")
    def live_board():
        return respond(engine.active_employees())

    @app.route("/api/team/ranking", methods=["GET"], endpoint="api_team_ranking")
    @json_endpoint
    def ranking():
        raw = (request.args.get("employee_ids") or "").split(",")
        employee_ids = [require_positive_id(x, "employee_ids") for x in raw if x.strip()]
        if not employee_ids:
            raise ValidationError("employee_ids is required")
        window_start, window_end = _window_from_args(request.args, today=engine.today())
        return respond(engine.team_ranking(employee_ids, window_start, window_end))

    @app.route("/api/kiosk/<action>", methods=["POST"], endpoint="api_kiosk")
    @json_endpoint
    def kiosk(action: str):
        payload = body()
        try:
            kind = IdentifierKind(payload.get("identifier_kind") or IdentifierKind.EMPLOYEE_NUMBER.value)
        except ValueError:
            raise ValidationError("Unsupported identifier_kind")
        try:
            employee_id = container.employee_directory.resolve(kind, str(payload.get("identifier") or ""))
        except NotFoundError as e:
            return jsonify({"ok": False, "errorKind": "NotFound", "message": str(e)}), 401
        except InfrastructureError as e:
            return respond(OperationResult.failure(e.kind, str(e)))
        return run_action(employee_id, action, payload, ClockMethod.KIOSK)
