"""
API Namespaces - Organized endpoint groups
"""

import time
from urllib.parse import quote

from flask import Response, current_app, request
from flask_restx import Namespace, Resource
from werkzeug.exceptions import RequestEntityTooLarge

from filedrop import __version__
from filedrop.api.auth_decorator import require_api_key
from filedrop.api.v1 import api
from filedrop.api.v1.models import (
    error_response,
    status_response,
    upload_parser,
    upload_response,
)
from filedrop.application.transfer_service import TransferService
from filedrop.config.settings import BYTES_PER_MB
from filedrop.domain.errors import (
    DomainError,
    EntropySourceError,
    ErrorCategory,
    PayloadTooLargeError,
    StorageWriteError,
    TokenCollisionError,
    TransferNotFoundError,
    create_error_response,
)

# =============================================================================
# Files Namespace - Upload and single-use download
# =============================================================================

files_ns = Namespace("files", description="Single-use file transfer operations")


@files_ns.route("/upload", endpoint="file_upload")
class FileUpload(Resource):
    """Upload a file and receive a single-use token"""

    @files_ns.doc("upload_file", security="bearer")
    @files_ns.expect(upload_parser)
    @files_ns.response(200, "Success", upload_response)
    @files_ns.response(400, "Bad Request", error_response)
    @files_ns.response(401, "Unauthorized", error_response)
    @files_ns.response(413, "Payload Too Large", error_response)
    @files_ns.response(500, "Internal Server Error", error_response)
    @require_api_key
    def post(self):
        """
        Upload a file

        Stores the file and returns a token. The file can be downloaded
        exactly once with that token, after which it is deleted.
        """
        transfer_service = _get_transfer_service()
        if transfer_service is None:
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                "Transfer service not initialized",
                status_code=503
            )

        upload = request.files.get("file")
        if upload is None:
            return create_error_response(
                ErrorCategory.MISSING_PAYLOAD,
                "Missing 'file' form field",
                status_code=400
            )

        try:
            result = transfer_service.upload(
                upload.stream,
                upload.filename,
                content_length=upload.content_length or None,
            )
        except PayloadTooLargeError as e:
            current_app.logger.info(f"[UPLOAD] Rejected oversized upload: {e}")
            return _payload_too_large_response(e.max_bytes)
        except (StorageWriteError, TokenCollisionError, EntropySourceError) as e:
            current_app.logger.error(f"[UPLOAD] Upload failed: {e}")
            return create_error_response(
                e.category,
                str(e),
                status_code=500
            )
        except DomainError as e:
            return create_error_response(
                e.category,
                str(e),
                status_code=400
            )
        finally:
            upload.close()

        current_app.logger.info(
            f"[UPLOAD] '{result.safe_filename}' uploaded with token "
            f"{result.token[:8]} - {request.remote_addr}"
        )
        return result.to_dict(), 200


@files_ns.route("/<string:token>", endpoint="file_download")
@files_ns.param("token", "The single-use download token")
class FileDownloadResource(Resource):
    """Download a file by token"""

    @files_ns.doc("download_file")
    @files_ns.response(200, "File content")
    @files_ns.response(404, "File Not Found", error_response)
    def get(self, token):
        """
        Download a file using its token

        The first successful request consumes the token and deletes the
        file. Unknown, malformed and already used tokens all return 404.
        """
        return serve_download(token)


def serve_download(token: str):
    """
    Consume a token and stream its file.

    Shared by the versioned API and the short public ``/file/<token>`` route.
    Flask routes HEAD to GET handlers; a HEAD must not spend the token.
    """
    if request.method != "GET":
        payload, status = create_error_response(
            ErrorCategory.INVALID_REQUEST,
            f"{request.method} not allowed on download",
            status_code=405
        )
        return payload, status, {"Allow": "GET"}

    transfer_service = _get_transfer_service()
    if transfer_service is None:
        return create_error_response(
            ErrorCategory.SYSTEM_ERROR,
            "Transfer service not initialized",
            status_code=503
        )

    try:
        download = transfer_service.download(token)
    except TransferNotFoundError:
        current_app.logger.info(f"[DOWNLOAD] No file for token {token[:8]}")
        return create_error_response(
            ErrorCategory.FILE_NOT_FOUND,
            "File not found or already downloaded",
            status_code=404
        )

    headers = {
        "Content-Disposition": _content_disposition(download.filename),
        "Cache-Control": "no-cache, no-store, must-revalidate",
        "Pragma": "no-cache",
        "Expires": "0",
    }
    if download.size_bytes is not None:
        headers["Content-Length"] = str(download.size_bytes)

    response = Response(
        download,
        status=200,
        headers=headers,
        content_type=download.mime_type,
        direct_passthrough=True,
    )
    # Runs on completion and on client disconnect alike
    response.call_on_close(download.close)

    current_app.logger.info(
        f"[DOWNLOAD] Serving '{download.filename}' ({download.mime_type}) "
        f"for token {token[:8]} - {request.remote_addr}"
    )
    return response


# =============================================================================
# System Namespace - Service status
# =============================================================================

system_ns = Namespace("system", description="Service status operations")


@system_ns.route("/status")
class Status(Resource):
    """Service status"""

    @system_ns.doc("get_status")
    @system_ns.marshal_with(status_response, code=200)
    def get(self):
        """
        Get service status

        Reports pending transfers and the configured upload ceiling.
        """
        transfer_service = _get_transfer_service()
        started_at = getattr(current_app, "started_at", time.time())
        config = getattr(current_app, "filedrop_config", None)

        return {
            "status": "ok",
            "version": __version__,
            "active_files": transfer_service.active_files if transfer_service else 0,
            "max_file_size_mb": (
                transfer_service.max_file_size / BYTES_PER_MB if transfer_service else 0
            ),
            "auth_enabled": bool(config and config.auth_enabled),
            "uptime_seconds": int(time.time() - started_at),
        }, 200


# =============================================================================
# Error Handlers
# =============================================================================

@api.errorhandler(RequestEntityTooLarge)
def handle_request_too_large(error):
    """Body rejected by MAX_CONTENT_LENGTH before reaching the service."""
    transfer_service = _get_transfer_service()
    max_bytes = transfer_service.max_file_size if transfer_service else 0
    return _payload_too_large_response(max_bytes)


# =============================================================================
# Helper Functions
# =============================================================================

def _payload_too_large_response(max_bytes: int):
    max_size_mb = round(max_bytes / BYTES_PER_MB, 1)
    return create_error_response(
        ErrorCategory.FILE_TOO_LARGE,
        f"File exceeds {max_bytes} bytes",
        context={"max_size_mb": max_size_mb},
        status_code=413
    )


def _content_disposition(filename: str) -> str:
    """
    Build an attachment Content-Disposition header value.

    Non-ASCII names are sent as RFC 5987 ``filename*`` with an ASCII fallback.
    """
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    return f"attachment; filename=\"{filename}\""


def _get_transfer_service():
    """
    Get transfer service from DI container.

    Returns:
        TransferService instance or None if not available
    """
    container = getattr(current_app, "container", None)
    if container is None or not container.is_registered(TransferService):
        current_app.logger.warning("Transfer service not available")
        return None
    return container.resolve(TransferService)
