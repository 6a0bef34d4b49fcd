"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields, reqparse
from werkzeug.datastructures import FileStorage

from filedrop.api.v1 import api

# =============================================================================
# Request Parsers
# =============================================================================

upload_parser = reqparse.RequestParser()
upload_parser.add_argument(
    "file",
    location="files",
    type=FileStorage,
    required=True,
    help="File to share (multipart form field 'file')",
)

# =============================================================================
# Response Models
# =============================================================================

upload_response = api.model(
    "UploadResponse",
    {
        "success": fields.Boolean(description="Whether the upload succeeded"),
        "message": fields.String(description="Status message"),
        "token": fields.String(
            description="Single-use download token", example="9f86d081884c7d65"
        ),
        "filename": fields.String(description="Filename as sent by the client"),
        "safe_filename": fields.String(description="Filename as stored"),
        "size_bytes": fields.Integer(description="Stored size in bytes"),
        "size_mb": fields.Float(description="Stored size in MB"),
        "download_url": fields.String(
            description="Public reference for the single download",
            example="http://localhost:8080/file/9f86d081884c7d65",
        ),
        "uploaded_at": fields.String(description="Upload time (ISO timestamp)"),
        "note": fields.String(description="Usage note"),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="Error message"),
        "action": fields.String(description="Suggested action"),
        "details": fields.Raw(description="Additional error details", allow_null=True),
    },
)

status_response = api.model(
    "StatusResponse",
    {
        "status": fields.String(description="Service status", enum=["ok"]),
        "version": fields.String(description="Service version"),
        "active_files": fields.Integer(description="Uploads waiting for download"),
        "max_file_size_mb": fields.Float(description="Upload ceiling in MB"),
        "auth_enabled": fields.Boolean(description="Whether uploads require an API key"),
        "uptime_seconds": fields.Integer(description="Seconds since startup"),
    },
)
