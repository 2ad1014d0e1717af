"""Shipping cost strategies."""
from abc import ABC, abstractmethod


class ShippingCalculator(ABC):
    """Computes the shipping cost of a parcel."""

    name: str = "shipping"

    @abstractmethod
    def calculate(self, weight_kg: float) -> float:
        """Shipping cost for a parcel weight."""


class ExpressShipping(ShippingCalculator):
    name = "express"

    def calculate(self, weight_kg: float) -> float:
        return round(15.0 + weight_kg * 5.0, 2)


class StandardShipping(ShippingCalculator):
    name = "standard"

    def calculate(self, weight_kg: float) -> float:
        return round(5.0 + weight_kg * 2.0, 2)


class EconomyShipping(ShippingCalculator):
    name = "economy"

    def calculate(self, weight_kg: float) -> float:
        return round(2.0 + weight_kg * 1.0, 2)
