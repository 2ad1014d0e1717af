"""
Toy collaborators used to exercise resolution.

Payment and shipping strategies, an observer-style notification center and a
checkout controller, modelled on the Strategy and Observer tutorial examples.
Nothing here talks to a real gateway or delivers real notifications.
"""
from .checkout import CheckoutController, OrderService
from .notifications import EmailNotifier, NotificationCenter, NotifierInterface, SmsNotifier
from .payments import (
    BankTransferPayment,
    BkashPayment,
    CreditCardPayment,
    NagadPayment,
    PaymentInterface,
    PayPalPayment,
)
from .registration import DEMO_TYPES, register_demo_services
from .shipping import EconomyShipping, ExpressShipping, ShippingCalculator, StandardShipping

__all__ = [
    "BankTransferPayment",
    "BkashPayment",
    "CheckoutController",
    "CreditCardPayment",
    "DEMO_TYPES",
    "EconomyShipping",
    "EmailNotifier",
    "ExpressShipping",
    "NagadPayment",
    "NotificationCenter",
    "NotifierInterface",
    "OrderService",
    "PaymentInterface",
    "PayPalPayment",
    "ShippingCalculator",
    "SmsNotifier",
    "StandardShipping",
    "register_demo_services",
]
