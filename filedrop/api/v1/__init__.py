"""
API v1 - FileDrop REST API

This module contains the versioned API endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

# Get API version from environment
API_VERSION = os.getenv("API_VERSION", "v1")

# Create blueprint for API v1
api_v1_bp = Blueprint("api_v1", __name__, url_prefix=f"/api/{API_VERSION}")

authorizations = {
    "bearer": {
        "type": "apiKey",
        "in": "header",
        "name": "Authorization",
        "description": "Bearer <API_KEY>",
    }
}

# Initialize Flask-RESTX API with Swagger documentation
api = Api(
    api_v1_bp,
    version="1.0",
    title="FileDrop API",
    description="Single-use file relay: upload once, download once",
    doc="/docs",  # Swagger UI will be available at /api/v1/docs
    authorizations=authorizations,
    license="MIT",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import files_ns, system_ns  # noqa: E402

# Register namespaces
api.add_namespace(files_ns, path="/files")
api.add_namespace(system_ns, path="/system")
