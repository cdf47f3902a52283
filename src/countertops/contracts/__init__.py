"""Contracts module - protocols for the external collaborators.

The checkout and mailing services depend on these protocols rather than on a
concrete payment provider or email service, so any gateway client or mail
transport with matching methods can be passed in.
"""

from .protocols import (
    CutSheetEmail as CutSheetEmail,
    EmailSender as EmailSender,
    PaymentGateway as PaymentGateway,
    PaymentRequest as PaymentRequest,
    PaymentSession as PaymentSession,
)
