from __future__ import annotations

import io
import logging
from pathlib import Path

from flask import Flask, Response, jsonify, send_file

from .bitmap import OutputFormat
from .config import Settings
from .errors import CaptureError, RasterError, SensorFetchError
from .pipeline import DashboardPipeline
from .rendering import render_dashboard_html
from .sensors import HomeAssistantClient, collect_dashboard

log = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "rendering" / "static"


def create_app(settings: Settings, client: HomeAssistantClient, pipeline: DashboardPipeline) -> Flask:
    app = Flask(__name__, static_folder=str(STATIC_DIR), static_url_path="/assets")

    def dashboard_html() -> str:
        return render_dashboard_html(collect_dashboard(client, settings))

    def image_response(fmt: OutputFormat) -> Response:
        image = pipeline.render(dashboard_html(), fmt)
        return send_file(
            io.BytesIO(image.data),
            mimetype=image.content_type,
            download_name="dashboard" + fmt.suffix,
            max_age=0,
        )

    @app.route("/")
    def index():
        return dashboard_html()

    @app.route("/dashboard.bits")
    def dashboard_bits():
        return image_response(OutputFormat.BITS)

    @app.route("/dashboard.pbm")
    def dashboard_pbm():
        return image_response(OutputFormat.PBM)

    @app.route("/dashboard.png")
    def dashboard_png():
        return image_response(OutputFormat.PNG)

    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok", "capture": pipeline.backend.started})

    @app.errorhandler(SensorFetchError)
    def sensor_error(exc):
        log.exception("Sensor fetch failed")
        return _plain_error(f"Sensor data unavailable: {exc}", 502)

    @app.errorhandler(CaptureError)
    def capture_error(exc):
        log.exception("Dashboard capture failed")
        return _plain_error(f"Capture failed: {exc}", 500)

    @app.errorhandler(RasterError)
    def raster_error(exc):
        log.exception("Captured raster rejected")
        return _plain_error(f"Invalid raster: {exc}", 500)

    return app


def _plain_error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")
