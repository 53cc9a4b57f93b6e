import argparse
import sys
from pathlib import Path

# Import configuration management
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from pdf_digest import max_bytes_from_mb, setup_logging
from app.summarize.factory import create_summarize_module

BASE_DIR = Path(__file__).parent.parent
UI_DIR = BASE_DIR / "ui"

# Multipart framing and the form fields need a little room on top of the file itself
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


def create_app(config_manager: ConfigManager = None, client_factory=None, store=None) -> Flask:
    """Build the Flask application.

    Args:
        config_manager: Configuration source, a fresh ConfigManager by default
        client_factory: Optional GeminiClient factory (tests inject fakes here)
        store: Optional key-value store for the remembered API key
    """
    config_manager = config_manager or ConfigManager()
    gemini_config = config_manager.get_gemini_config()
    upload_config = config_manager.get_upload_config()
    paths_config = config_manager.get_paths_config()

    flask_app = Flask(__name__)
    flask_app.wsgi_app = ProxyFix(
        flask_app.wsgi_app,
        x_proto=1,     # trust 1 hop for X-Forwarded-Proto
        x_host=1,      # trust 1 hop for X-Forwarded-Host
        x_prefix=1)    # trust 1 hop for X-Forwarded-Prefix
    flask_app.config["MAX_CONTENT_LENGTH"] = (
        max_bytes_from_mb(upload_config.max_pdf_size_mb) + MULTIPART_OVERHEAD_BYTES
    )

    with open(UI_DIR / "index.html", "r", encoding="utf-8") as f:
        index_template = f.read()

    summarize_module = create_summarize_module(
        data_dir=BASE_DIR / paths_config.data_dir,
        gemini_config=gemini_config,
        upload_config=upload_config,
        index_template=index_template,
        credential_file=paths_config.credential_file,
        client_factory=client_factory,
        store=store,
    )
    flask_app.register_blueprint(summarize_module["blueprint"])
    flask_app.extensions["summarize_module"] = summarize_module

    @flask_app.errorhandler(RequestEntityTooLarge)
    def too_large(_error):
        return jsonify({
            "success": False,
            "error": f"File size exceeds {upload_config.max_pdf_size_mb}MB limit",
            "error_type": "ValidationError"
        }), 413

    @flask_app.get("/actuator/health")
    def actuator_health():
        """Health check endpoint for monitoring tools and cloud platforms."""
        return jsonify({
            "status": "UP",
            "service": "pdf-digest"
        }), 200

    return flask_app


app = create_app()

# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Flask application for PDF summaries")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    app_config = ConfigManager().get_app_config()
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    setup_logging(app_config.debug)
    print(f"✅ Serving PDF summaries on {app_config.host}:{app_config.port}")
    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug
    )
