"""
Report Generation

- Aggregator: TestResults -> ContentAnalysisReport (gaps, recommendations)
- Export: report, competitive results and readiness -> JSON documents
- Accumulator: run-level cost/latency counters
"""

from .aggregator import (
    build_recommendations,
    build_report,
    find_content_gaps,
    summarize_providers,
)
from .export import (
    export_competitive_results,
    export_readiness,
    export_report,
    readiness_to_dict,
    report_to_dict,
)
from .accumulator import RunAccumulator, RunSnapshot

__all__ = [
    "build_recommendations",
    "build_report",
    "find_content_gaps",
    "summarize_providers",
    "export_competitive_results",
    "export_readiness",
    "export_report",
    "readiness_to_dict",
    "report_to_dict",
    "RunAccumulator",
    "RunSnapshot",
]
