"""Error taxonomy for the scrape cycle.

Recoverable errors end a single scrape cycle and are surfaced through the
``up`` gauge:
 - TransportError: DNS, connect, timeout or protocol failure
 - StatusCodeError: upstream answered with a non-2xx status
 - BodyReadError: headers arrived but the body could not be read

MalformedPayloadError is raised when the payload is not a JSON object at all.
It is fatal unless the exporter is configured to downgrade it.
"""


class ExporterError(Exception):
    """Base exporter error (do not raise directly)."""


class ScrapeError(ExporterError):
    """A single upstream scrape attempt failed."""


class TransportError(ScrapeError):
    """Connection could not be established or timed out."""


class StatusCodeError(ScrapeError):
    """Upstream returned a non-2xx status code."""

    def __init__(self, status_code: int):
        super().__init__(f"StatusCode: {status_code}")
        self.status_code = status_code


class BodyReadError(ScrapeError):
    """Response body could not be read in full."""


class MalformedPayloadError(ExporterError):
    """Upstream payload is not a JSON object."""


__all__ = [
    'ExporterError',
    'ScrapeError',
    'TransportError',
    'StatusCodeError',
    'BodyReadError',
    'MalformedPayloadError',
]
