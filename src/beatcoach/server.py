#!/usr/bin/env python3
"""
Simple development server for the dance coach frontend.
Provides an API endpoint for audio feature extraction.

    POST /api/analyze     body: raw audio bytes  ->  feature JSON
"""

import asyncio
import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import urlparse

from beatcoach.core.errors import (
    DecodeFormatError,
    DecodeUnsupportedError,
    EmptySignalError,
)
from beatcoach.io.exporter import FeaturesExporter
from beatcoach.pipeline import AudioPipeline

logger = logging.getLogger(__name__)


class AnalyzeHandler(BaseHTTPRequestHandler):
    """HTTP handler for the analysis API."""

    # Replaced per server in make_server()
    pipeline = AudioPipeline()
    exporter = FeaturesExporter()

    def do_POST(self):
        """Handle POST requests for API endpoints."""
        parsed = urlparse(self.path)

        if parsed.path == "/api/analyze":
            self.handle_analyze()
        else:
            self.send_json_error(404, "not_found", "Not found")

    def do_GET(self):
        self.send_json_error(404, "not_found", "Not found")

    def handle_analyze(self):
        """Analyze the uploaded audio and return its features."""
        try:
            content_length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            self.send_json_error(400, "bad_length", "Content-Length must be an integer")
            return

        if content_length <= 0:
            self.send_json_error(400, "empty_body", "Request body must contain audio data")
            return

        data = self.rfile.read(content_length)

        try:
            features = asyncio.run(self.pipeline.extract_features(data))
        except DecodeUnsupportedError as exc:
            self.send_json_error(501, "decode_unsupported", str(exc))
            return
        except EmptySignalError as exc:
            self.send_json_error(422, "empty_signal", str(exc))
            return
        except DecodeFormatError as exc:
            self.send_json_error(422, "decode_format", str(exc))
            return

        self.send_json(200, self.exporter.to_dict(features))

    def send_json(self, status: int, payload: dict):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def send_json_error(self, status: int, kind: str, message: str):
        self.send_json(status, {"error": kind, "message": message})

    def log_message(self, format, *args):
        """Route request logs through logging."""
        logger.info("%s - %s", self.address_string(), format % args)


def make_server(
    port: int = 8080,
    host: str = "",
    pipeline: AudioPipeline | None = None,
) -> HTTPServer:
    """Build (but do not start) the API server."""
    handler = type(
        "BoundAnalyzeHandler",
        (AnalyzeHandler,),
        {"pipeline": pipeline or AudioPipeline()},
    )
    return HTTPServer((host, port), handler)


def run_server(port=8080):
    """Run the development server."""
    httpd = make_server(port)

    logger.info("Dance coach API running at http://localhost:%d", port)

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        httpd.server_close()


def main():
    """CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Dance coach analysis server")
    parser.add_argument("-p", "--port", type=int, default=8080, help="Port to run on")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[beatcoach] %(message)s")
    run_server(args.port)


if __name__ == "__main__":
    main()
