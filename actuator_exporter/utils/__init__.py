"""HTTP helpers for talking to the upstream Actuator endpoint"""
from .deadline import DeadlineBackend, DeadlineTransport
from .fetch import ActuatorFetcher, ActuatorResponse

__all__ = [
    'ActuatorFetcher',
    'ActuatorResponse',
    'DeadlineBackend',
    'DeadlineTransport',
]
