"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import time
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from filedrop.application.dependency_container import DependencyContainer
from filedrop.application.transfer_service import TransferService
from filedrop.config.settings import FileDropConfig
from filedrop.domain.file_transfer import FileRegistry, FileStorageRepository, InMemoryFileRegistry
from filedrop.infrastructure.local_file_storage_repository import LocalFileStorageRepository
from filedrop.infrastructure.upload_sweeper import UploadSweeper

logger = logging.getLogger(__name__)

# Room for the multipart envelope around the file itself
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


def create_app(config: Optional[FileDropConfig] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, loaded from the environment if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = FileDropConfig.from_env()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_file_size + MULTIPART_OVERHEAD_BYTES
    app.filedrop_config = config
    app.started_at = time.time()

    # Configure CORS
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "expose_headers": ["Content-Type", "Content-Disposition"],
                "max_age": 3600,
            }
        },
    )

    _initialize_services(app, config)

    _register_blueprints(app)

    _register_health_endpoint(app)

    return app


def _initialize_services(app: Flask, config: FileDropConfig) -> None:
    """
    Initialize application services and attach them to the app using DependencyContainer.

    PATTERN:
    --------
    1. Create DependencyContainer instance
    2. Register configuration
    3. Register infrastructure adapters (registry, storage)
    4. Register the transfer service
    5. Restore pending transfers and start maintenance
    6. Attach container to Flask app

    Args:
        app: Flask application
        config: Application configuration
    """
    app.upload_sweeper = None

    try:
        container = DependencyContainer()
        container.register_singleton(FileDropConfig, config)

        registry = InMemoryFileRegistry()
        storage = LocalFileStorageRepository(config.storage_path)
        container.register_singleton(FileRegistry, registry)
        container.register_singleton(FileStorageRepository, storage)

        transfer_service = TransferService(
            registry,
            storage,
            max_file_size=config.max_file_size,
            token_bytes=config.token_bytes,
            base_url=config.base_url,
        )
        container.register_singleton(TransferService, transfer_service)

        if config.recover_on_startup:
            transfer_service.recover()

        if config.sweeper_enabled:
            sweeper = UploadSweeper(
                transfer_service,
                max_age_seconds=config.upload_ttl_seconds,
                interval_seconds=config.sweep_interval_seconds,
            )
            sweeper.start()
            container.register_singleton(UploadSweeper, sweeper)
            app.upload_sweeper = sweeper

        app.container = container
        app.transfer_service = transfer_service

        logger.info("Application services initialized successfully")

    except Exception as e:
        logger.exception(f"Could not initialize services: {e}")
        app.container = None
        app.transfer_service = None


def _register_blueprints(app: Flask) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
    """
    from filedrop.api.legacy import legacy_bp
    from filedrop.api.v1 import API_VERSION, api_v1_bp

    app.register_blueprint(api_v1_bp)
    app.register_blueprint(legacy_bp)

    logger.info(
        f"API {API_VERSION} registered at /api/{API_VERSION} "
        f"with Swagger UI at /api/{API_VERSION}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of the service.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "storage": "unknown",
        "sweeper": "not_configured",
    }

    if getattr(app, "transfer_service", None) is not None:
        health_status["storage"] = "available"
    else:
        health_status["storage"] = "unavailable"
        health_status["status"] = "degraded"

    sweeper = getattr(app, "upload_sweeper", None)
    if sweeper is not None:
        health_status["sweeper"] = "running" if sweeper.running else "stopped"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
