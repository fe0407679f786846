from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from excel_filter import ValidationError, filter_workbook
from excel_filter.config import ALLOWED_EXTENSIONS, MAX_FILE_SIZE_BYTES

app = Flask(__name__)
# Leave headroom for the form fields around the file part.
app.config["MAX_CONTENT_LENGTH"] = MAX_FILE_SIZE_BYTES + 1024 * 1024


def _json_error(message: str, status_code: int = 400):
    return jsonify(status="error", message=message), status_code


def _get_uploaded_file() -> bytes:
    file_obj = request.files.get("file")
    if not file_obj or not file_obj.filename:
        raise ValidationError("No file uploaded")

    ext = Path(file_obj.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Please upload a valid Excel file (.xlsx or .xlsm)")

    file_bytes = file_obj.read()
    if not file_bytes:
        raise ValidationError("Uploaded file is empty")
    if len(file_bytes) > MAX_FILE_SIZE_BYTES:
        raise ValidationError("File too large. Please upload a file up to 50MB.")

    return file_bytes


@app.errorhandler(ValidationError)
def _handle_validation_error(exc):
    return _json_error(str(exc), 400)


@app.errorhandler(Exception)
def _handle_unexpected_error(exc):
    if isinstance(exc, HTTPException):
        return exc
    app.logger.exception("Unhandled error while filtering workbook")
    return _json_error("Backend error while processing request: {0}".format(exc), 500)


@app.route("/health")
def health():
    return jsonify(status="ok")


@app.route("/api/excel/upload", methods=["POST"])
def upload_excel():
    file_bytes = _get_uploaded_file()
    result = filter_workbook(
        file_bytes,
        request.form.get("columnName"),
        request.form.get("filterValue", ""),
    )
    return jsonify(result.to_dict())


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
