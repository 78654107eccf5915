"""XQuery documentation report generation."""

from xqdoc.report.descriptor import REPORT_DESCRIPTOR, ReportDescriptor
from xqdoc.report.generator import (
    GenerationResult,
    Phase,
    XQueryDocReport,
    materialized_implementation,
)
from xqdoc.report.resources import ResourceCopyError, copy_resources

__all__ = [
    "GenerationResult",
    "Phase",
    "REPORT_DESCRIPTOR",
    "ReportDescriptor",
    "ResourceCopyError",
    "XQueryDocReport",
    "copy_resources",
    "materialized_implementation",
]
