"""Application layer - editor commands, checkout and configuration files."""

from .checkout import CheckoutError, CheckoutService, CutSheetMailer
from .commands import ConfigurationEditor
from .dtos import CheckoutOutput, CommandResult, FulfilledOrder

__all__ = [
    "CheckoutError",
    "CheckoutOutput",
    "CheckoutService",
    "CommandResult",
    "ConfigurationEditor",
    "CutSheetMailer",
    "FulfilledOrder",
]
