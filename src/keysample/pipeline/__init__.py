"""Multi-instance orchestration, reporting, and logging setup."""

from .logger import configure_logging, session_log_name
from .orchestrate import SessionResult, sample_instances
from .report import (
    format_results,
    format_run_summary,
    log_run_summary,
    print_run_summary,
    render_text,
)

__all__ = [
    "configure_logging",
    "session_log_name",
    "SessionResult",
    "sample_instances",
    "format_results",
    "format_run_summary",
    "log_run_summary",
    "print_run_summary",
    "render_text",
]
