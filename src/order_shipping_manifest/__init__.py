# src/order_shipping_manifest/__init__.py
from .pipelines.export_processor import ExportProcessor
from .pipelines.export_writer import ExportPayload, ExportWriter
from .pipelines.profiles import serialize_profile_a, serialize_profile_b
from .pipelines.settlement import aggregate
from .pipelines.tag_reconciler import TagReconciler, apply

__all__ = [
    "ExportProcessor",
    "ExportPayload",
    "ExportWriter",
    "serialize_profile_a",
    "serialize_profile_b",
    "aggregate",
    "TagReconciler",
    "apply",
]
