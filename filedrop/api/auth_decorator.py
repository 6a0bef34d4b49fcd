"""
Access Gate Decorator

Provides a decorator that guards Flask routes with a bearer API key and an
optional User-Agent restriction. The transfer service performs no
authentication itself and trusts this gate's decision.
"""

import hmac
from functools import wraps
from typing import Optional

from flask import current_app, request

from filedrop.config.settings import FileDropConfig
from filedrop.domain.errors import ErrorCategory, create_error_response


def require_api_key(f):
    """
    Decorator rejecting requests without a valid bearer key.

    Expects ``Authorization: Bearer <key>``. When ALLOWED_USER_AGENT is
    configured the User-Agent header must also contain it. When no API key
    is configured the gate is open.

    Usage:
        @require_api_key
        def post(self):
            pass
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        config = _get_config()

        if config is None:
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                "Access gate not configured",
                status_code=503,
            )

        if not config.auth_enabled:
            return f(*args, **kwargs)

        client_ip = _extract_client_ip(request)
        reason = _check_request(config, request)
        if reason:
            current_app.logger.warning(f"[AUTH] Rejected request from {client_ip}: {reason}")
            return create_error_response(
                ErrorCategory.UNAUTHORIZED,
                reason,
                status_code=401,
            )

        current_app.logger.debug(f"[AUTH] Authorized request from {client_ip}")
        return f(*args, **kwargs)

    return decorated_function


def _check_request(config: FileDropConfig, request) -> Optional[str]:
    """
    Validate the request credentials.

    Returns:
        None if the request is authorized, otherwise the rejection reason
    """
    auth_header = request.headers.get('Authorization', '')
    if not auth_header:
        return "missing Authorization header"

    # Format: "Bearer <key>"
    parts = auth_header.split(' ', 1)
    if len(parts) != 2 or parts[0] != 'Bearer':
        return "malformed Authorization header"

    # Constant-time comparison against timing attacks
    if not hmac.compare_digest(parts[1].encode(), config.api_key.encode()):
        return "invalid API key"

    if config.allowed_user_agent:
        user_agent = request.headers.get('User-Agent', '')
        if config.allowed_user_agent not in user_agent:
            return f"user agent not allowed: {user_agent!r}"

    return None


def _extract_client_ip(request) -> str:
    """
    Extract client IP from request.

    Checks X-Forwarded-For header first (for proxy/load balancer),
    then falls back to remote_addr for direct connections.
    """
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        # Format: "client, proxy1, proxy2"
        return forwarded_for.split(',')[0].strip()

    return request.remote_addr or '127.0.0.1'


def _get_config() -> Optional[FileDropConfig]:
    """
    Get the relay configuration from the DI container.

    Returns:
        FileDropConfig or None if not available
    """
    container = getattr(current_app, 'container', None)
    if container is None:
        current_app.logger.warning("DI container not available for access gate")
        return None

    if not container.is_registered(FileDropConfig):
        return None
    return container.resolve(FileDropConfig)
