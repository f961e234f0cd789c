# src/gps_signal_report/__init__.py
from .pipelines.report_generator import Report, ReportGenerator
from .api.handler import handle_report_request

__all__ = [
    "Report",
    "ReportGenerator",
    "handle_report_request",
]
