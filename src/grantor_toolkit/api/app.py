"""
Report download API (Flask)
===========================
Serves the dashboard's "Download PDF" action.

Endpoints:
  - GET  /health
  - POST /api/download-pdf

Config (environment):
  AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_S3_BUCKET, AWS_REGION
  REPORT_STORAGE_ROOT, REPORT_DOCUMENT_TYPES, REPORT_FETCH_WORKERS
  CORS_ALLOW_ORIGINS (comma-separated), LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from .. import __version__
from ..common.logging_utils import configure_logging, parse_level
from ..report import ReportConfig, ReportInputError, ReportRequest, build_report
from ..storage import ObjectStore, S3ObjectStore, StorageConfigError, StorageSettings

logger = logging.getLogger(__name__)

StoreFactory = Callable[[], ObjectStore]


def default_store_factory() -> ObjectStore:
    """S3 store from environment settings; raises StorageConfigError if unset."""
    return S3ObjectStore(StorageSettings.from_env())


def create_app(
    store_factory: Optional[StoreFactory] = None,
    config: Optional[ReportConfig] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        store_factory: Returns the object store for a request. Called once
            per request before any assembly work.
        config: Report configuration (default: from environment)

    Returns:
        Configured Flask app
    """
    configure_logging(parse_level(os.getenv("LOG_LEVEL")))

    app = Flask(__name__)
    origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
    CORS(app, origins=origins, expose_headers=["Content-Disposition"])

    factory = store_factory or default_store_factory
    report_config = config or ReportConfig.from_env()

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": __version__}), 200

    @app.route("/api/download-pdf", methods=["POST"])
    def download_pdf():
        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify({"error": "Invalid JSON request"}), 400

        try:
            report_request = ReportRequest.from_payload(payload)
        except ReportInputError as e:
            return jsonify({"error": str(e)}), 400

        try:
            store = factory()
        except StorageConfigError as e:
            logger.error(f"Storage not configured: {e}")
            return jsonify({"error": str(e)}), 500

        try:
            result = build_report(report_request, store, report_config)
        except ReportInputError as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:  # noqa: BLE001
            logger.exception(f"Error generating PDF for {report_request.application_id}")
            return jsonify({"error": str(e) or "Failed to generate PDF"}), 500

        response = Response(result.pdf_bytes, status=200, mimetype="application/pdf")
        response.headers["Content-Disposition"] = f'attachment; filename="{result.filename}"'
        response.headers["X-Report-Pages"] = str(result.page_count)
        if result.skipped_documents:
            response.headers["X-Report-Skipped"] = ",".join(
                o.ref.doc_type for o in result.merged if not o.ok
            )
        return response

    return app
