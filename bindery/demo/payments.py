"""Payment strategies."""
from abc import ABC, abstractmethod
from typing import Any, Dict


class PaymentInterface(ABC):
    """Common contract of every payment method."""

    name: str = "payment"

    @abstractmethod
    def get_fee(self, amount: float) -> float:
        """Processing fee for an amount."""

    def pay(self, amount: float) -> Dict[str, Any]:
        """Return a receipt for paying ``amount`` with this method."""
        if amount <= 0:
            raise ValueError("Payment amount must be positive")
        fee = round(self.get_fee(amount), 2)
        return {
            "method": self.name,
            "amount": round(amount, 2),
            "fee": fee,
            "total": round(amount + fee, 2),
        }


class CreditCardPayment(PaymentInterface):
    name = "credit_card"

    def __init__(self, card_number: str = "4111111111111111"):
        self.card_number = card_number

    def get_fee(self, amount: float) -> float:
        return amount * 0.03

    def pay(self, amount: float) -> Dict[str, Any]:
        receipt = super().pay(amount)
        receipt["card"] = f"****{self.card_number[-4:]}"
        return receipt


class PayPalPayment(PaymentInterface):
    name = "paypal"

    def __init__(self, email: str = "customer@example.com"):
        self.email = email

    def get_fee(self, amount: float) -> float:
        return amount * 0.034 + 0.30


class BankTransferPayment(PaymentInterface):
    name = "bank_transfer"

    def get_fee(self, amount: float) -> float:
        return 5.0


class BkashPayment(PaymentInterface):
    name = "bkash"

    def get_fee(self, amount: float) -> float:
        return amount * 0.0185


class NagadPayment(PaymentInterface):
    name = "nagad"

    def get_fee(self, amount: float) -> float:
        return amount * 0.0149
