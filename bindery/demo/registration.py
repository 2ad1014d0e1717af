"""Container registration for the demo collaborators."""
from typing import Tuple, Type

from bindery.infrastructure.di.container import DIContainer
from bindery.infrastructure.logging.logger import get_logger

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
from .shipping import EconomyShipping, ExpressShipping, ShippingCalculator, StandardShipping

logger = get_logger(__name__)

DEMO_TYPES: Tuple[Type, ...] = (
    PaymentInterface,
    CreditCardPayment,
    PayPalPayment,
    BankTransferPayment,
    BkashPayment,
    NagadPayment,
    ShippingCalculator,
    ExpressShipping,
    StandardShipping,
    EconomyShipping,
    NotifierInterface,
    EmailNotifier,
    SmsNotifier,
    NotificationCenter,
    CheckoutController,
    OrderService,
)


def _create_notification_center(container: DIContainer) -> NotificationCenter:
    center = NotificationCenter()
    center.attach(container.resolve(EmailNotifier))
    center.attach(container.resolve(SmsNotifier))
    return center


def register_demo_services(
    container: DIContainer,
    payment: str = "CreditCardPayment",
    shipping: str = "StandardShipping",
) -> None:
    """
    Catalog the demo types and bind their contracts.

    Args:
        container: Container to register into
        payment: Name of the PaymentInterface implementation
        shipping: Name of the ShippingCalculator implementation
    """
    container.catalog(*DEMO_TYPES)
    container.bind("PaymentInterface", payment)
    container.bind("ShippingCalculator", shipping)
    container.singleton(NotificationCenter, _create_notification_center)
    logger.debug(f"Registered demo services with payment={payment} shipping={shipping}")
