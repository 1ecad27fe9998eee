"""Integer percentage helpers shared by progress, grading and plagiarism scoring"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero"""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percent(part: int, whole: int) -> int:
    """round(100 * part / whole) with half-up rounding, exact on integers"""
    if whole <= 0:
        raise ValueError("whole must be positive")
    return (200 * part + whole) // (2 * whole)
