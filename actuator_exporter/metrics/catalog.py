"""Fixed catalog of Spring Actuator fields exposed as gauges"""
from typing import Dict, Optional, Tuple

from .models import MetricDescriptor, ValueType


NAMESPACE = "spring_actuator"

UP_NAME = "up"
UP_HELP = "Was the last scrape of Spring Actuator successful"

MEMORY_LABELS = ("memory",)
THREAD_LABELS = ("thread",)
CLASSES_LABELS = ("classes",)
GC_LABELS = ("gc",)
LOAD_LABELS = ("load_average",)


ACTUATOR_METRICS: Tuple[MetricDescriptor, ...] = (
    MetricDescriptor("mem", "mem", "The total system memory in KB", MEMORY_LABELS),
    MetricDescriptor("mem.free", "mem_free", "The amount of free memory in KB", MEMORY_LABELS),
    MetricDescriptor("heap.committed", "heap_committed", "Heap information in KB", MEMORY_LABELS),
    MetricDescriptor("heap.used", "heap_used", "Heap information in KB", MEMORY_LABELS),
    MetricDescriptor("nonheap.committed", "nonheap_committed", "Non heap information in KB", MEMORY_LABELS),
    MetricDescriptor("nonheap.used", "nonheap_used", "Non heap information in KB", MEMORY_LABELS),
    MetricDescriptor("threads", "threads", "Thread information", THREAD_LABELS),
    MetricDescriptor("classes", "classes", "Class load information", CLASSES_LABELS),
    MetricDescriptor("classes.loaded", "classes_loaded", "Class load information", CLASSES_LABELS),
    MetricDescriptor("classes.unloaded", "classes_unloaded", "Class load information", CLASSES_LABELS),
    MetricDescriptor("gc.ps_scavenge.count", "gc_ps_scavenge_count", "Garbage collection information", GC_LABELS),
    MetricDescriptor("gc.ps_scavenge.time", "gc_ps_scavenge_time", "Garbage collection information", GC_LABELS),
    MetricDescriptor("gc.ps_marksweep.count", "gc_ps_marksweep_count", "Garbage collection information", GC_LABELS),
    MetricDescriptor("gc.ps_marksweep.time", "gc_ps_marksweep_time", "Garbage collection information", GC_LABELS),
    MetricDescriptor(
        "systemload.average", "systemload_average", "The average system load", LOAD_LABELS,
        value_type=ValueType.FLOAT,
    ),
)


def _index(descriptors: Tuple[MetricDescriptor, ...]) -> Dict[str, MetricDescriptor]:
    """Build the key lookup, rejecting duplicate keys or exposed names"""
    by_key: Dict[str, MetricDescriptor] = {}
    names = set()
    for descriptor in descriptors:
        if descriptor.upstream_key in by_key:
            raise ValueError(f"Duplicate upstream key in catalog: {descriptor.upstream_key}")
        if descriptor.name in names or descriptor.name == UP_NAME:
            raise ValueError(f"Duplicate metric name in catalog: {descriptor.name}")
        by_key[descriptor.upstream_key] = descriptor
        names.add(descriptor.name)
    return by_key


_BY_KEY = _index(ACTUATOR_METRICS)


def get_descriptor(upstream_key: str) -> Optional[MetricDescriptor]:
    """Look up the descriptor for an upstream JSON key, None if untracked"""
    return _BY_KEY.get(upstream_key)
