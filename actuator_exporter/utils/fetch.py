"""Single-attempt HTTP fetcher for the Actuator metrics endpoint"""
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import httpx

from ..errors import BodyReadError, StatusCodeError, TransportError
from .deadline import DeadlineBackend, DeadlineTransport


class ActuatorResponse:
    """A 2xx upstream response whose body has not been read yet"""

    def __init__(self, response: httpx.Response, deadline: float, timeout: float):
        self._response = response
        self._deadline = deadline
        self._timeout = timeout

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def read(self) -> bytes:
        """Read the full body before the request deadline"""
        chunks = []
        try:
            for chunk in self._response.iter_bytes():
                if time.monotonic() > self._deadline:
                    raise BodyReadError(f"deadline of {self._timeout}s exceeded reading body")
                chunks.append(chunk)
        except httpx.HTTPError as e:
            raise BodyReadError(str(e) or type(e).__name__) from e
        return b"".join(chunks)


class ActuatorFetcher:
    """Performs one bounded GET per call, without retries.

    Connect, read, write and pool waits are each bounded by ``timeout``, and
    an overall deadline of ``timeout`` seconds from the start of the request
    covers the headers and the complete body. The default transport enforces
    that deadline on every socket operation.
    """

    def __init__(self, url: str, timeout: float, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.backend = DeadlineBackend()
        if transport is None:
            transport = DeadlineTransport(self.backend)
        self.client = httpx.Client(timeout=httpx.Timeout(timeout), transport=transport, follow_redirects=True)

    @contextmanager
    def open(self) -> Iterator[ActuatorResponse]:
        """Send the request and yield the response once headers arrive.

        Raises TransportError when no response was received in time and
        StatusCodeError for any status outside 2xx.
        """
        deadline = time.monotonic() + self.timeout
        self.backend.set_deadline(deadline)
        try:
            try:
                response = self.client.send(self.client.build_request("GET", self.url), stream=True)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransportError(str(e) or type(e).__name__) from e

            try:
                if time.monotonic() > deadline:
                    raise TransportError(f"deadline of {self.timeout}s exceeded waiting for headers")
                if not response.is_success:
                    raise StatusCodeError(response.status_code)
                yield ActuatorResponse(response, deadline, self.timeout)
            finally:
                response.close()
        finally:
            self.backend.set_deadline(None)

    def fetch(self) -> bytes:
        """GET the configured URL and return its body"""
        with self.open() as response:
            return response.read()

    def close(self) -> None:
        """Release pooled connections"""
        self.client.close()
