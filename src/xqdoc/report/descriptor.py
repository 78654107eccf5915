"""Static description of the XQuery documentation report."""

from __future__ import annotations

from dataclasses import dataclass

CATEGORY_PROJECT_REPORTS = "Project Reports"


@dataclass(frozen=True)
class ReportDescriptor:
    """How the report presents itself to a site or report index."""

    output_name: str
    name: str
    description: str
    category: str
    external_report: bool = True
    can_generate_report: bool = True

    @property
    def output_filename(self) -> str:
        return f"{self.output_name}.html"


REPORT_DESCRIPTOR = ReportDescriptor(
    output_name="xquerydoc/XQuery_documentation",
    name="XQuery Doc",
    description="XQuery documentation",
    category=CATEGORY_PROJECT_REPORTS,
)
