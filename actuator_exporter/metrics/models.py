"""Metric descriptor models"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ValueType(Enum):
    """How an upstream JSON value is coerced before it is set on a gauge"""
    UNSIGNED = "unsigned"
    FLOAT = "float"


@dataclass(frozen=True)
class MetricDescriptor:
    """Describes one upstream field and the gauge it is exposed as"""
    upstream_key: str
    name: str
    help_text: str
    label_names: Tuple[str, ...]
    value_type: ValueType = ValueType.UNSIGNED

    def label_values(self) -> Tuple[str, ...]:
        """Label values for the single child of this gauge.

        Every label carries the upstream key, so dashboards built on the
        ``memory="mem.free"`` style selectors keep working.
        """
        return tuple(self.upstream_key for _ in self.label_names)
