"""Tests for FastAPI server module"""
from unittest.mock import patch

import httpx
import pytest
from fastapi.testclient import TestClient

from actuator_exporter.app.server import MetricsServer
from actuator_exporter.collectors.actuator import ActuatorCollector
from actuator_exporter.config import Config
from actuator_exporter.errors import MalformedPayloadError
from actuator_exporter.utils.fetch import ActuatorFetcher


URL = "http://actuator.test/metrics"


class TestMetricsServer:
    """Test FastAPI server functionality"""

    def setup_method(self):
        """Setup test fixtures"""
        self.upstream_calls = 0
        self.upstream_status = 200
        self.upstream_body = b'{"mem": 204800, "heap.used": 1024, "systemload.average": 1.5}'

    def handler(self, request):
        self.upstream_calls += 1
        return httpx.Response(self.upstream_status, content=self.upstream_body)

    def make_client(self, **config_overrides):
        config = Config(scrape_uri=URL, **config_overrides)
        fetcher = ActuatorFetcher(URL, config.scrape_timeout, transport=httpx.MockTransport(self.handler))
        self.server = MetricsServer(config, collector=ActuatorCollector(config, fetcher=fetcher))
        return TestClient(self.server.get_app())

    def test_metrics_endpoint(self):
        """Metrics are scraped and served in the text exposition format"""
        client = self.make_client()

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "spring_actuator_up 1.0" in response.text
        assert 'spring_actuator_heap_used{memory="heap.used"} 1024.0' in response.text
        assert 'spring_actuator_systemload_average{load_average="systemload.average"} 1.5' in response.text

    def test_every_request_scrapes_upstream(self):
        """No result is cached between requests"""
        client = self.make_client()

        client.get("/metrics")
        client.get("/metrics")
        client.get("/metrics")

        assert self.upstream_calls == 3

    def test_upstream_failure_still_returns_200(self):
        """Failures are surfaced through the up gauge only"""
        self.upstream_status = 500
        client = self.make_client()

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "spring_actuator_up 0.0" in response.text
        assert 'memory="mem"' not in response.text

    def test_custom_telemetry_path(self):
        """The metrics route follows the configured path"""
        client = self.make_client(telemetry_path="/actuator/prometheus")

        assert client.get("/actuator/prometheus").status_code == 200
        assert client.get("/metrics").status_code == 404

    def test_index_endpoint(self):
        """Landing page links to the metrics path"""
        client = self.make_client(telemetry_path="/custom")

        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Spring Actuator Exporter" in response.text
        assert "href='/custom'" in response.text
        assert self.upstream_calls == 0

    def test_health_endpoint(self):
        """Health does not contact the upstream"""
        client = self.make_client()

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["collector"]["scrape_uri"] == URL
        assert data["collector"]["scrapes_total"] == 0
        assert self.upstream_calls == 0

    def test_request_logging_header(self):
        """Request logging middleware annotates responses"""
        client = self.make_client(enable_request_logging=True)

        response = client.get("/health")

        assert "x-process-time" in response.headers

    def test_malformed_payload_terminates_process(self):
        """An unparseable upstream body exits the process with status 1"""
        self.upstream_body = b'{"mem": 2048'
        client = self.make_client(enable_request_logging=False)

        with patch("os._exit") as mock_exit:
            with pytest.raises(MalformedPayloadError):
                client.get("/metrics")

        mock_exit.assert_called_once_with(1)

    def test_malformed_payload_downgraded(self):
        """With the fatal policy off, the scrape reports up 0"""
        self.upstream_body = b"<html>not json</html>"
        client = self.make_client(fail_on_malformed_json=False)

        with patch("os._exit") as mock_exit:
            response = client.get("/metrics")

        assert response.status_code == 200
        assert "spring_actuator_up 0.0" in response.text
        mock_exit.assert_not_called()

    def test_shutdown_closes_fetcher(self):
        """Lifespan shutdown releases the upstream client"""
        with self.make_client() as client:
            client.get("/health")

        assert self.server.collector.fetcher.client.is_closed
