"""External API client implementations."""

from .gateway_client import HttpInstallmentGatewayClient, domain_error
from .reminder_notifier import LoggingReminderNotifier

__all__ = [
    "HttpInstallmentGatewayClient",
    "LoggingReminderNotifier",
    "domain_error",
]
