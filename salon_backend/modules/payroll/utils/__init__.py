from .money import ZERO, to_decimal, quantize_money

__all__ = ["ZERO", "to_decimal", "quantize_money"]
