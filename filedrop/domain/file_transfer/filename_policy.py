"""
Filename and MIME Policy

Pure functions for handling untrusted filenames: sanitation, storage name
construction, original name recovery and content type inference.
"""

import mimetypes
import unicodedata
from pathlib import PurePosixPath
from typing import Dict, Optional

STORAGE_NAME_SEPARATOR = "_"

DEFAULT_MIME_TYPE = "application/octet-stream"

# Path traversal and shell/filesystem hazards
DANGEROUS_SEQUENCES = ["/", "\\", "..", ":", "*", "?", '"', "<", ">", "|"]

PLACEHOLDER = "_"

# Control characters and unpaired surrogates
_UNSAFE_CATEGORIES = ("Cc", "Cs")

# Checked before the system registry so results do not depend on the host
CUSTOM_MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".zip": "application/zip",
    ".rar": "application/x-rar-compressed",
    ".7z": "application/x-7z-compressed",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".csv": "text/csv",
}

# Reverse lookup used when a recovered name carries no extension
MIME_TO_EXTENSION: Dict[str, str] = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "text/plain": ".txt",
    "application/json": ".json",
    "video/mp4": ".mp4",
    "audio/mpeg": ".mp3",
    "application/zip": ".zip",
    "application/msword": ".doc",
}


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Replace path traversal and filesystem hazard sequences with a placeholder.

    Control characters (NUL, CR, LF, DEL and the C1 range) are replaced as
    well, as are lone surrogates, so the result can be used as a file name
    and in a header value.
    Never raises; an empty result is still returned as a (valid) name.
    Applying it twice yields the same result as applying it once.

    Args:
        filename: Untrusted client-supplied filename

    Returns:
        Sanitized filename
    """
    if not filename:
        return ""

    safe = str(filename)
    for sequence in DANGEROUS_SEQUENCES:
        safe = safe.replace(sequence, PLACEHOLDER)
    return "".join(
        PLACEHOLDER if unicodedata.category(c) in _UNSAFE_CATEGORIES else c
        for c in safe
    )


def build_storage_name(token: str, safe_filename: str) -> str:
    """Physical name of a stored upload: token, separator, sanitized name."""
    return f"{token}{STORAGE_NAME_SEPARATOR}{safe_filename}"


def recover_original_name(stored_name: str, token: str) -> str:
    """
    Strip the ``token + separator`` prefix from a stored name.

    Returns the stored name unchanged when the prefix is absent.
    """
    prefix = f"{token}{STORAGE_NAME_SEPARATOR}"
    if stored_name.startswith(prefix):
        return stored_name[len(prefix):]
    return stored_name


def _extension(filename: str) -> str:
    return PurePosixPath(filename).suffix.lower()


def infer_mime_type(filename: str) -> str:
    """
    Infer a content type from the filename extension.

    Looks up the static table first, then the system registry, and falls
    back to a generic binary type.

    Args:
        filename: Filename to inspect (extension is case-insensitive)

    Returns:
        MIME type string
    """
    ext = _extension(filename or "")
    if not ext:
        return DEFAULT_MIME_TYPE

    if ext in CUSTOM_MIME_TYPES:
        return CUSTOM_MIME_TYPES[ext]

    guessed, _ = mimetypes.guess_type(f"file{ext}", strict=False)
    return guessed or DEFAULT_MIME_TYPE


def ensure_file_extension(filename: str, mime_type: str) -> str:
    """Append a canonical extension for the MIME type if the name has none."""
    if _extension(filename):
        return filename
    return filename + MIME_TO_EXTENSION.get(mime_type, "")
