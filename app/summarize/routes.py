"""
Summarize routes: upload page, summary endpoint and API key management.
"""
from flask import Blueprint, request, jsonify, render_template_string

from .services import SummarizeService


def create_summarize_routes(summarize_service: SummarizeService, index_template: str) -> Blueprint:
    """Create Flask routes for PDF summarization."""

    bp = Blueprint('summarize', __name__)

    @bp.route("/", methods=["GET"])
    def index():
        """Render the upload page."""
        return render_template_string(
            index_template,
            has_api_key=summarize_service.has_api_key(),
            strategies=summarize_service.strategies,
            default_strategy=summarize_service.default_strategy,
            max_size_mb=summarize_service.upload_config.max_pdf_size_mb,
        )

    @bp.route("/summarize", methods=["POST"])
    def summarize():
        """Summarize the uploaded PDF."""
        result, status_code = summarize_service.summarize(
            request.files.get("file"),
            api_key=request.form.get("api_key"),
            strategy=request.form.get("strategy"),
        )
        if result.is_success:
            return jsonify({
                "success": True,
                "summary": result.text,
                "summary_html": summarize_service.renderer.render_markdown(result.text),
                "strategy": result.strategy
            })
        return jsonify({
            "success": False,
            "error": result.error,
            "error_type": result.error_type
        }), status_code

    @bp.route("/api_key", methods=["GET"])
    def get_api_key_status():
        """Report whether an API key is available, never the key itself."""
        return jsonify({"has_api_key": summarize_service.has_api_key()})

    @bp.route("/api_key", methods=["POST"])
    def save_api_key():
        """Remember the API key; an empty value forgets it."""
        data = request.get_json(silent=True) or {}
        api_key = data.get("api_key", request.form.get("api_key", ""))
        if not isinstance(api_key, str):
            return jsonify({"error": "api_key must be a string"}), 400
        stored = summarize_service.save_api_key(api_key)
        return jsonify({"success": True, "has_api_key": stored})

    @bp.route("/api_key", methods=["DELETE"])
    def delete_api_key():
        """Forget the stored API key."""
        summarize_service.clear_api_key()
        return jsonify({"success": True, "has_api_key": summarize_service.has_api_key()})

    return bp
