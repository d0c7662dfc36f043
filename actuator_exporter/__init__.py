"""Prometheus exporter for Spring Boot Actuator JSON metrics"""

__version__ = "1.0.0"
