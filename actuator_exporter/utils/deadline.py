"""Network backend that bounds every socket operation by a request deadline"""
import ssl
import threading
import time
from typing import Any, Iterable, Optional, Type

import httpcore
import httpx


class DeadlineBackend(httpcore.NetworkBackend):
    """Wraps the synchronous httpcore backend with a per-thread deadline.

    While a deadline is set, each connect, TLS handshake, read and write
    gets at most the time remaining until it, and fails immediately once it
    has passed. Pooled streams consult the deadline of the request that is
    currently using them.
    """

    def __init__(self, backend: Optional[httpcore.NetworkBackend] = None):
        self._backend = backend or httpcore.SyncBackend()
        self._local = threading.local()

    def set_deadline(self, deadline: Optional[float]) -> None:
        """Set the monotonic deadline for requests made from this thread"""
        self._local.deadline = deadline

    def bound(self, timeout: Optional[float], error: Type[Exception]) -> Optional[float]:
        """Clamp ``timeout`` to the remaining time, raising ``error`` if none is left"""
        deadline = getattr(self._local, "deadline", None)
        if deadline is None:
            return timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise error("request deadline exceeded")
        return remaining if timeout is None else min(timeout, remaining)

    def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        local_address: Optional[str] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.NetworkStream:
        stream = self._backend.connect_tcp(
            host,
            port,
            timeout=self.bound(timeout, httpcore.ConnectTimeout),
            local_address=local_address,
            socket_options=socket_options,
        )
        return DeadlineStream(stream, self)

    def connect_unix_socket(
        self,
        path: str,
        timeout: Optional[float] = None,
        socket_options: Optional[Iterable[Any]] = None,
    ) -> httpcore.NetworkStream:
        stream = self._backend.connect_unix_socket(
            path,
            timeout=self.bound(timeout, httpcore.ConnectTimeout),
            socket_options=socket_options,
        )
        return DeadlineStream(stream, self)

    def sleep(self, seconds: float) -> None:
        self._backend.sleep(seconds)


class DeadlineStream(httpcore.NetworkStream):
    """Network stream whose operations are clamped by its backend's deadline"""

    def __init__(self, stream: httpcore.NetworkStream, backend: DeadlineBackend):
        self._stream = stream
        self._backend = backend

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        return self._stream.read(max_bytes, timeout=self._backend.bound(timeout, httpcore.ReadTimeout))

    def write(self, buffer: bytes, timeout: Optional[float] = None) -> None:
        self._stream.write(buffer, timeout=self._backend.bound(timeout, httpcore.WriteTimeout))

    def close(self) -> None:
        self._stream.close()

    def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> httpcore.NetworkStream:
        stream = self._stream.start_tls(
            ssl_context,
            server_hostname=server_hostname,
            timeout=self._backend.bound(timeout, httpcore.ConnectTimeout),
        )
        return DeadlineStream(stream, self._backend)

    def get_extra_info(self, info: str) -> Any:
        return self._stream.get_extra_info(info)


class DeadlineTransport(httpx.HTTPTransport):
    """HTTP transport whose connection pool runs on a DeadlineBackend"""

    def __init__(self, backend: DeadlineBackend):
        super().__init__()
        self.backend = backend
        # HTTPTransport does not accept a network backend; rebuild its pool with one.
        self._pool = httpcore.ConnectionPool(
            ssl_context=httpx.create_ssl_context(),
            network_backend=backend,
        )
