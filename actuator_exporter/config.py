"""Configuration management for Spring Actuator Exporter"""
import re
from pathlib import Path
from typing import Literal, Optional, Tuple, Union
from urllib.parse import urlparse

from pydantic import Field, validator
from pydantic_settings import BaseSettings


_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(value: Union[str, int, float]) -> float:
    """Parse seconds or a duration string such as ``500ms`` or ``1m30s``"""
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    try:
        return float(text)
    except ValueError:
        pass

    if not text or _DURATION_PART.sub("", text):
        raise ValueError(f"Invalid duration: {value!r}")
    return sum(float(amount) * _DURATION_UNITS[unit] for amount, unit in _DURATION_PART.findall(text))


def split_listen_address(address: str) -> Tuple[str, int]:
    """Split ``[host]:port`` into host and port; an empty host means all interfaces"""
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must be [host]:port, got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 listen address must be bracketed, got {address!r}")
    if not port.isdigit() or not 1 <= int(port) <= 65535:
        raise ValueError(f"Invalid listen port in {address!r}")
    return host or "0.0.0.0", int(port)


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Web settings
    listen_address: str = Field(default=":9101", description="Address to listen on for web interface and telemetry")
    telemetry_path: str = Field(default="/metrics", description="Path under which to expose metrics")

    # Upstream settings
    scrape_uri: str = Field(default="http://localhost/metrics", description="URI on which to scrape Spring Actuator")
    scrape_timeout: float = Field(default=5.0, gt=0, description="Timeout in seconds for a single scrape of Spring Actuator")
    fail_on_malformed_json: bool = Field(default=True, description="Terminate when the upstream payload is not a JSON object")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    # Service settings
    service_name: str = Field(default="spring-actuator-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('listen_address')
    def validate_listen_address(cls, v):
        split_listen_address(v)
        return v

    @validator('telemetry_path')
    def validate_telemetry_path(cls, v):
        if not v.startswith("/") or v == "/":
            raise ValueError("telemetry_path must start with '/' and differ from the landing page")
        return v

    @validator('scrape_uri')
    def validate_scrape_uri(cls, v):
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"scrape_uri must be an absolute http(s) URL, got {v!r}")
        return v

    @validator('scrape_timeout', pre=True)
    def parse_scrape_timeout(cls, v):
        return parse_duration(v)

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @property
    def listen_host(self) -> str:
        return split_listen_address(self.listen_address)[0]

    @property
    def listen_port(self) -> int:
        return split_listen_address(self.listen_address)[1]
