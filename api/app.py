"""Flask REST API exposing the expense tracker services."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from expense_core.analytics import total_amount
from expense_core.config import Settings, load_settings
from expense_core.exceptions import StorageError, ValidationError
from expense_core.services import ExpenseTracker
from expense_core.storage import JSONStorage
from expense_core.validators import THEME_MODES, parse_year_month, validate_enum


def create_app(data_dir: Optional[Path] = None, settings: Optional[Settings] = None) -> Flask:
    app = Flask(__name__)
    settings = settings or load_settings()

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    storage = JSONStorage(Path(data_dir or settings.data_dir))
    tracker = ExpenseTracker.from_storage(storage)
    app.extensions["expense_tracker"] = tracker

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(StorageError)
    def handle_storage_error(exc: StorageError):
        return _handle_error(exc, 500, "Storage error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _limit_arg() -> Optional[int]:
        raw = request.args.get("limit")
        if raw in (None, ""):
            return None
        try:
            limit = int(raw)
        except ValueError as exc:
            raise ValidationError("limit must be an integer") from exc
        if limit < 0:
            raise ValidationError("limit cannot be negative")
        return limit

    @app.get("/expenses")
    def list_expenses():
        expenses = tracker.all_expenses_sorted()
        limit = _limit_arg()
        shown = expenses if limit is None else expenses[:limit]
        return _success({
            "items": [expense.to_dict() for expense in shown],
            "total": f"{total_amount(expenses):.2f}",
        })

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = tracker.add_expense(payload)
        return _success(expense.to_dict(), 201)

    @app.get("/dashboard")
    def dashboard():
        reference = None
        month = request.args.get("month")
        if month:
            year, month_number = parse_year_month(month)
            # Any day in the month works as the reference.
            reference = date(year, month_number, 1)
        mode = request.args.get("theme")
        if mode:
            mode = validate_enum(mode, "theme", THEME_MODES)
        view = tracker.dashboard(reference=reference, mode=mode or None)
        return _success(view.to_dict())

    @app.get("/theme")
    def get_theme():
        return _success({"mode": tracker.theme.resolve(), "saved": tracker.theme.get() is not None})

    @app.put("/theme")
    def set_theme():
        payload = _json_body()
        mode = tracker.theme.set(payload.get("mode"))
        return _success({"mode": mode, "saved": True})

    @app.post("/theme/toggle")
    def toggle_theme():
        mode = tracker.theme.toggle()
        return _success({"mode": mode, "saved": True})

    return app
