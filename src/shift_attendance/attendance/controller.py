from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import DomainError, InvalidTransition, NotFound, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _failure(error: str, message: str, status: int):
    return jsonify({"success": False, "error": error, "message": message}), status


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    views = container.attendance_views

    def json_errors(view):
        """Map domain failures to HTTP responses."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except InvalidTransition as e:
                return _failure("INVALID_TRANSITION", str(e), 409)
            except NotFound as e:
                return _failure("NOT_FOUND", str(e), 404)
            except ValidationError as e:
                return _failure("VALIDATION_ERROR", str(e), 400)
            except DomainError as e:
                return _failure("DOMAIN_ERROR", str(e), 400)
            except Exception:
                logger.exception("unhandled error in %s", request.path)
                return _failure("INTERNAL_ERROR", "Failed to process attendance request", 500)

        return wrapper

    def _query_int(name: str, **bounds):
        value = request.args.get(name)
        if value is None or not value.strip():
            return None
        return require_int(value, name, **bounds)

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    @json_errors
    def attendance_record():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        # Only employeeId, type and notes are read; timestamps come from the server clock.
        session = service.record_action(data.get("employeeId"), data.get("type"), notes=data.get("notes"))
        employee = container.roster_repo.get_by_id(session.employee_id)
        return jsonify(views.session(session, now=service.now(), employee=employee)), 200

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @json_errors
    def attendance_list():
        day = _query_int("day", min_value=1, max_value=31)
        month = _query_int("month", min_value=1, max_value=12)
        year = _query_int("year", min_value=1970, max_value=9999)
        search = request.args.get("q") or request.args.get("search")

        iso_date = request.args.get("date")
        if iso_date:
            try:
                target = parse_iso_date(iso_date)
            except ValueError:
                raise ValidationError(f"Invalid date: {iso_date!r} (expected YYYY-MM-DD)") from None
            day, month, year = target.day, target.month, target.year

        now = service.now()
        if year is None and month is None and day is None:
            today = service.normalizer.local_day(now)
            year, month = today.year, today.month

        if day is not None and month is not None and year is not None:
            try:
                target = date(year, month, day)
            except ValueError as e:
                raise ValidationError(f"Invalid date: {e}") from None
            items = service.list_day(target, search)
        elif month is not None and year is not None:
            items = service.list_month(year, month, search)
        elif year is not None and day is None and month is None:
            items = service.list_year(year, search)
        else:
            raise ValidationError("Provide day+month+year, month+year, or year")

        return jsonify(views.entries(items, now=now, roster=service.roster_by_id())), 200

    @app.route("/api/attendance/<int:session_id>", methods=["GET"], endpoint="attendance_detail")
    @json_errors
    def attendance_detail(session_id: int):
        session = service.get_session(session_id)
        employee = container.roster_repo.get_by_id(session.employee_id)
        return jsonify(views.session(session, now=service.now(), employee=employee)), 200

    @app.route("/api/attendance/status/<int:employee_id>", methods=["GET"], endpoint="attendance_status")
    @json_errors
    def attendance_status(employee_id: int):
        return jsonify(views.status(service.current_status(employee_id))), 200

    @app.route("/api/attendance/stats/<int:employee_id>", methods=["GET"], endpoint="attendance_stats")
    @json_errors
    def attendance_stats(employee_id: int):
        return jsonify(views.totals(service.period_totals(employee_id))), 200

    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="employee_attendance")
    @json_errors
    def employee_attendance(employee_id: int):
        limit = _query_int("limit")
        if limit is None:
            limit = DEFAULT_HISTORY_LIMIT
        rows = service.history(employee_id, limit=limit)
        employee = container.roster_repo.get_by_id(employee_id)
        now = service.now()
        return jsonify([views.session(s, now=now, employee=employee) for s in rows]), 200
