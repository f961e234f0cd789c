from .handler import ReportRequestError, handle_report_request

__all__ = ["ReportRequestError", "handle_report_request"]
