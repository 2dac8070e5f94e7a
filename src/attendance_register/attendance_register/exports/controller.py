from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_date_key
from ..common.responses import apply_mutation, error_response, ok
from ..core.enums import ExportFormat
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from .service import backup_filename, csv_filename, printable_filename


def register(app: Flask, container: Container) -> None:
    exports = container.export_service

    def _download(body: str, *, fmt: ExportFormat, filename: str, encoding: str = "utf-8"):
        return app.response_class(
            body.encode(encoding),
            mimetype=fmt.mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _confirmed() -> bool:
        value = request.args.get("confirm") or request.form.get("confirm") or ""
        return value.strip().lower() in {"1", "true", "yes"}

    def _uploaded_document() -> bytes:
        if request.mimetype == "multipart/form-data":
            upload = request.files.get("file")
            raw = upload.read() if upload else b""
        else:
            raw = request.get_data()
        if not raw:
            raise ValidationError("No backup file provided")
        return raw

    @app.route("/export/<date_key>.csv", methods=["GET"], endpoint="export_csv")
    def export_csv(date_key: str):
        try:
            parse_date_key(date_key)
        except DomainError as e:
            return error_response(e)
        # BOM so Excel picks UTF-8.
        return _download(exports.to_csv(date_key), fmt=ExportFormat.CSV, filename=csv_filename(date_key), encoding="utf-8-sig")

    @app.route("/export/<date_key>.doc", methods=["GET"], endpoint="export_doc")
    def export_doc(date_key: str):
        try:
            parse_date_key(date_key)
        except DomainError as e:
            return error_response(e)
        return _download(exports.to_printable_document(date_key), fmt=ExportFormat.DOC, filename=printable_filename(date_key))

    @app.route("/export/backup.json", methods=["GET"], endpoint="export_json")
    def export_json():
        return _download(exports.to_json(), fmt=ExportFormat.JSON, filename=backup_filename())

    @app.route("/import", methods=["POST"], endpoint="import_json")
    def import_json():
        """Validate a backup, then overwrite everything once the user confirmed.

        Without ``confirm`` the document is only checked and summarized.
        """

        try:
            document = _uploaded_document()
            if not _confirmed():
                preview = exports.preview_import(document)
                return ok(
                    {
                        "confirm_required": True,
                        "message": "Import will overwrite current students & records. Resend with confirm=1.",
                        "student_count": preview.student_count,
                        "date_count": preview.date_count,
                    }
                )
            result, warning = apply_mutation(lambda: exports.from_json(document))
        except DomainError as e:
            return error_response(e)

        if result is None:
            result = exports.current_counts()
        return ok(
            {"message": "Import complete.", "student_count": result.student_count, "date_count": result.date_count},
            warning=warning,
        )
