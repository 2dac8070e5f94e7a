from __future__ import annotations

from flask import Flask, current_app, request

from ..common.datetime_utils import default_register_date, parse_date_key, require_weekday
from ..common.responses import apply_mutation, error_response, ok
from ..common.validators import optional_str, require_bool
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .model import AttendancePatch


def register(app: Flask, container: Container) -> None:
    store = container.register_store

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object body")
        return data

    def _day_key(date_key: str) -> str:
        """Weekday policy is an input rule of this layer; the store accepts any date."""

        parse_date_key(date_key)
        if current_app.config.get("ENFORCE_WEEKDAYS", True):
            require_weekday(date_key)
        return date_key

    def _day_payload(date_key: str) -> dict:
        return {
            "date": date_key,
            "entries": [e.to_dict() for e in store.entries_for(date_key)],
            "summary": store.summarize(date_key).to_dict(),
        }

    @app.route("/api/status", methods=["GET"], endpoint="status")
    def status():
        return ok(
            {
                "default_date": default_register_date(),
                "student_count": len(store.students()),
                "storage_healthy": store.storage_healthy,
                "notices": [str(n) for n in store.load_notices],
            }
        )

    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        return ok({"students": [s.to_dict() for s in store.students()]})

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    def add_student():
        try:
            data = _json_body()
            student, warning = apply_mutation(lambda: store.add_student(data.get("name"), data.get("roll")))
        except DomainError as e:
            return error_response(e)

        student = student or store.find_student(str(data.get("roll", "")).strip())
        return ok({"student": student.to_dict()}, warning=warning, status=201)

    @app.route("/api/students/<roll>", methods=["PUT"], endpoint="update_student")
    def update_student(roll: str):
        try:
            data = _json_body()
            student, warning = apply_mutation(
                lambda: store.update_student(roll, data.get("name"), data.get("roll", roll))
            )
        except DomainError as e:
            return error_response(e)

        student = student or store.find_student(str(data.get("roll", roll)).strip())
        return ok({"student": student.to_dict()}, warning=warning)

    @app.route("/api/students/<roll>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(roll: str):
        deleted, warning = apply_mutation(lambda: store.delete_student(roll))
        return ok({"deleted": deleted is not False}, warning=warning)

    @app.route("/api/days/<date_key>", methods=["GET"], endpoint="view_day")
    def view_day(date_key: str):
        try:
            parse_date_key(date_key)
        except DomainError as e:
            return error_response(e)
        return ok(_day_payload(date_key))

    @app.route("/api/days/<date_key>/load", methods=["POST"], endpoint="load_day")
    def load_day(date_key: str):
        try:
            _day_key(date_key)
            _, warning = apply_mutation(lambda: store.materialize_date(date_key))
        except DomainError as e:
            return error_response(e)
        return ok(_day_payload(date_key), warning=warning)

    @app.route("/api/days/<date_key>/entries/<roll>", methods=["PATCH"], endpoint="set_attendance")
    def set_attendance(date_key: str, roll: str):
        try:
            _day_key(date_key)
            data = _json_body()
            patch = AttendancePatch(
                present=require_bool(data["present"], "present") if "present" in data else None,
                notes=optional_str(data.get("notes"), "notes"),
            )
            _, warning = apply_mutation(lambda: store.set_attendance(date_key, roll, patch))
        except DomainError as e:
            return error_response(e)

        entry = next(e for e in store.entries_for(date_key) if e.roll == roll)
        return ok({"entry": entry.to_dict(), "summary": store.summarize(date_key).to_dict()}, warning=warning)

    @app.route("/api/days/<date_key>/mark-all", methods=["POST"], endpoint="mark_all")
    def mark_all(date_key: str):
        try:
            _day_key(date_key)
            present = require_bool(_json_body().get("present"), "present")
            _, warning = apply_mutation(lambda: store.mark_all(date_key, present))
        except DomainError as e:
            return error_response(e)
        return ok(_day_payload(date_key), warning=warning)

    @app.route("/api/days/<date_key>/summary", methods=["GET"], endpoint="day_summary")
    def day_summary(date_key: str):
        try:
            parse_date_key(date_key)
        except DomainError as e:
            return error_response(e)
        return ok({"summary": store.summarize(date_key).to_dict()})
