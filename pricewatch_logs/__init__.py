"""
pricewatch_logs - run reports for price update sessions

Usage:
    from pricewatch_logs import SessionReportWriter

    writer = SessionReportWriter(log_dir="./logs")
    writer.write(session.to_dict())
"""

from .session_report import SessionReportWriter

__all__ = ['SessionReportWriter']
