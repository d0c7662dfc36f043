"""Collectors that turn upstream state into Prometheus exposition"""
from .base import BaseCollector
from .actuator import ActuatorCollector

__all__ = [
    'BaseCollector',
    'ActuatorCollector',
]
