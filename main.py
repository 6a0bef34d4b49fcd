"""
main.py

Flask backend for FileDrop, a single-use file relay.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors

Notes:
  - Configuration is read from environment variables (see filedrop.config)
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Public download references have the form BASE_URL/file/<token>
  - Uses application factory pattern for better testability
"""

from filedrop.app_factory import create_app
from filedrop.config import FileDropConfig, configure_logging

config = FileDropConfig.from_env()
configure_logging(config.log_level)
config.log_summary()

app = create_app(config)

if __name__ == "__main__":
    # threaded: one request per thread, the registry serializes token access
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=True)
