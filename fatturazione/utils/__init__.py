"""
Utilities package.
Provides logging setup and money helpers.
"""
from .logger import setup_logging, LoggerAdapter, actor_logger
from .money import round2, to_decimal, percentage_of, money_sum, ZERO, HUNDRED

__all__ = [
    "setup_logging",
    "LoggerAdapter",
    "actor_logger",
    "round2",
    "to_decimal",
    "percentage_of",
    "money_sum",
    "ZERO",
    "HUNDRED"
]
