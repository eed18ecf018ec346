"""
Structured logging for the IOC fusion backend.

JSON logs with timestamp, event_type, and indicator context.
"""

from backend_iocfusion.fusion_logging.logger import bind_ioc, get_logger

__all__ = ["bind_ioc", "get_logger"]
