"""Range conversion between the generic signal scales and the vendor scales.

Both helpers expect ``value`` to already lie in ``[0, old_max]`` and
``old_max`` to be non-zero. Callers validate first.
"""


def scale(value: int, old_max: int, new_max: int) -> int:
    """Map an integer from ``[0, old_max]`` to ``[0, new_max]``, truncating."""
    return value * new_max // old_max


def scale_float(value: float, old_max: float, new_max: int) -> int:
    """Map a float from ``[0, old_max]`` to the integer range ``[0, new_max]``, rounding."""
    return round(value / old_max * new_max)
