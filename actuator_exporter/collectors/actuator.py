"""Spring Boot Actuator collector"""
import threading
import time
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from ..config import Config
from ..errors import BodyReadError, MalformedPayloadError, StatusCodeError, TransportError
from ..logging_config import get_logger, log_scrape
from ..metrics.catalog import ACTUATOR_METRICS, NAMESPACE, UP_HELP, UP_NAME
from ..metrics.mapper import ResponseMapper
from ..utils.fetch import ActuatorFetcher
from .base import BaseCollector


logger = get_logger(__name__)


class ActuatorCollector(BaseCollector):
    """Scrapes the Actuator metrics endpoint once per inbound request.

    The collector owns a private registry with the ``up`` gauge and one
    labelled gauge per catalog entry. ``collect`` holds a lock across the
    whole reset, fetch, map and render sequence so that concurrent scrapes
    never observe each other's partial state.
    """

    def __init__(self, config: Config, fetcher: Optional[ActuatorFetcher] = None,
                 registry: Optional[CollectorRegistry] = None):
        super().__init__(config, "actuator", "Spring Boot Actuator JVM metrics")
        self.fetcher = fetcher or ActuatorFetcher(config.scrape_uri, config.scrape_timeout)
        self.registry = registry if registry is not None else CollectorRegistry()

        self.up = Gauge(UP_NAME, UP_HELP, namespace=NAMESPACE, registry=self.registry)
        self.gauges: Dict[str, Gauge] = {
            descriptor.upstream_key: Gauge(
                descriptor.name,
                descriptor.help_text,
                list(descriptor.label_names),
                namespace=NAMESPACE,
                registry=self.registry,
            )
            for descriptor in ACTUATOR_METRICS
        }
        self.mapper = ResponseMapper(self.gauges)

        self._lock = threading.Lock()
        self.scrapes_total = 0
        self.scrape_errors = 0
        self.last_scrape_time = 0.0
        self.last_scrape_duration = 0.0
        self.last_scrape_success: Optional[bool] = None

    def reset(self) -> None:
        """Drop every catalog gauge child so unreported fields are absent"""
        for gauge in self.gauges.values():
            gauge.clear()

    def scrape(self) -> None:
        """Fetch the upstream document and map it onto the gauges.

        Transport and status failures set ``up`` to 0 and end the cycle.
        A body read failure ends the cycle with ``up`` still at 1.
        MalformedPayloadError from the mapper is propagated.
        """
        start_time = time.time()
        self.scrapes_total += 1
        self.last_scrape_success = False

        try:
            with self.fetcher.open() as response:
                self.up.set(1)
                try:
                    body = response.read()
                except BodyReadError as e:
                    self.scrape_errors += 1
                    self._finish(start_time)
                    logger.error(
                        "Reading response body failed",
                        url=self.fetcher.url,
                        error=str(e),
                        event_type="scrape_failed"
                    )
                    return
        except (TransportError, StatusCodeError) as e:
            self.up.set(0)
            self.scrape_errors += 1
            log_scrape(logger, self.fetcher.url, self._finish(start_time), error=e)
            return

        try:
            count = self.mapper.apply(body)
        except MalformedPayloadError:
            self.scrape_errors += 1
            self._finish(start_time)
            raise

        self.last_scrape_success = True
        log_scrape(logger, self.fetcher.url, self._finish(start_time), metrics_count=count)

    def collect(self) -> bytes:
        """Run a full scrape cycle and render the registry"""
        with self._lock:
            self.reset()
            try:
                self.scrape()
            except MalformedPayloadError as e:
                if self.config.fail_on_malformed_json:
                    raise
                self.up.set(0)
                log_scrape(logger, self.fetcher.url, self.last_scrape_duration, error=e)
            return generate_latest(self.registry)

    def _finish(self, start_time: float) -> float:
        self.last_scrape_time = time.time()
        self.last_scrape_duration = self.last_scrape_time - start_time
        return self.last_scrape_duration

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status.update({
            "scrape_uri": self.fetcher.url,
            "scrape_timeout_seconds": self.fetcher.timeout,
            "scrapes_total": self.scrapes_total,
            "scrape_errors": self.scrape_errors,
            "last_scrape_success": self.last_scrape_success,
            "last_scrape_duration_seconds": round(self.last_scrape_duration, 3),
        })
        return status

    def cleanup(self):
        self.fetcher.close()
