"""Metric catalog, descriptor models and payload mapping"""
from .models import MetricDescriptor, ValueType
from .catalog import NAMESPACE, ACTUATOR_METRICS, get_descriptor
from .mapper import ResponseMapper

__all__ = [
    'MetricDescriptor',
    'ValueType',
    'NAMESPACE',
    'ACTUATOR_METRICS',
    'get_descriptor',
    'ResponseMapper',
]
