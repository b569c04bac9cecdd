from .setup import CorrelationIdFilter, configure_logging, get_logger, parse_level

__all__ = ["CorrelationIdFilter", "configure_logging", "get_logger", "parse_level"]
