"""Controllers whose collaborators come from the container."""
from typing import Any, Dict

from .notifications import NotificationCenter
from .payments import PaymentInterface
from .shipping import ShippingCalculator


class CheckoutController:
    """Takes payment through whatever PaymentInterface is bound."""

    def __init__(self, payment: PaymentInterface):
        self.payment = payment

    def checkout(self, amount: float) -> Dict[str, Any]:
        return self.payment.pay(amount)


class OrderService:
    """Prices an order, takes payment and publishes an order event."""

    def __init__(
        self,
        checkout: CheckoutController,
        shipping: ShippingCalculator,
        notifications: NotificationCenter,
    ):
        self.checkout = checkout
        self.shipping = shipping
        self.notifications = notifications

    def place_order(self, subtotal: float, weight_kg: float) -> Dict[str, Any]:
        shipping_cost = self.shipping.calculate(weight_kg)
        receipt = self.checkout.checkout(subtotal + shipping_cost)
        receipt["shipping"] = {"method": self.shipping.name, "cost": shipping_cost}
        self.notifications.notify("order.paid", receipt)
        return receipt
