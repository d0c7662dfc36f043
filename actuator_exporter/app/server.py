"""FastAPI server setup and routes"""
import html
import os
import time
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST

from ..collectors.actuator import ActuatorCollector
from ..config import Config
from ..errors import MalformedPayloadError
from ..logging_config import get_logger
from ..middleware.request_logging import RequestLoggingMiddleware


logger = get_logger(__name__)


class MetricsServer:
    """FastAPI server for the Spring Actuator exporter"""

    def __init__(self, config: Config, collector: Optional[ActuatorCollector] = None):
        self.config = config
        self.app = FastAPI(
            title="Spring Actuator Exporter",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )
        self.collector = collector or ActuatorCollector(config)
        self.start_time = time.time()

        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)

        self._setup_routes()
        self._setup_events()

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get(self.config.telemetry_path, response_class=Response)
        def get_metrics():
            """Scrape Spring Actuator and serve the result in Prometheus format"""
            try:
                content = self.collector.collect()
            except MalformedPayloadError as e:
                self._terminate(e)
                raise
            return Response(content, media_type=CONTENT_TYPE_LATEST)

        @self.app.get('/health')
        def health_check():
            """Liveness information; does not contact the upstream"""
            return {
                "status": "healthy",
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "collector": self.collector.get_status(),
            }

        @self.app.get('/', response_class=HTMLResponse)
        def index():
            """Landing page"""
            return self._generate_html_interface()

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("shutdown")
        async def shutdown_event():
            """Cleanup on shutdown"""
            logger.info("Shutting down Spring Actuator exporter", event_type="server_shutdown")
            self.collector.cleanup()

    def _terminate(self, error: MalformedPayloadError) -> None:
        """Stop the whole process on an unparseable upstream payload"""
        logger.critical(
            "JSON unmarshaling failed",
            error=str(error),
            scrape_uri=self.config.scrape_uri,
            event_type="fatal"
        )
        # Routes run on worker threads, where SystemExit would only end the thread.
        os._exit(1)

    def _generate_html_interface(self) -> str:
        """Generate HTML landing page"""
        path = html.escape(self.config.telemetry_path, quote=True)
        return f"""<html>
<head><title>Spring Actuator Exporter</title></head>
<body>
<h1>Spring Actuator Exporter</h1>
<p><a href='{path}'>Metrics</a></p>
</body>
</html>
"""

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
