#!/usr/bin/env python3
import math
from typing import Callable, List


class BoundedParameter:
    """
    /**
     * A mutable, range-bounded plate parameter (width, radius, scale, frequency...).
     *
     * Assignments are clamped into [minimum, maximum]; listeners are called with
     * (new_value, old_value) whenever the stored value actually changes.
     */
    """

    def __init__(
        self,
        name: str,
        default: float,
        minimum: float,
        maximum: float
    ) -> None:
        """
        /**
         * @param name     Label used in log messages.
         * @param default  Initial value, restored by reset().
         * @param minimum  Lower bound (inclusive).
         * @param maximum  Upper bound (inclusive).
         */
        """
        assert minimum <= maximum, f"{name}: empty range [{minimum}, {maximum}]"
        self.name: str = name
        self.default: float = float(default)
        self.minimum: float = float(minimum)
        self.maximum: float = float(maximum)
        self._value: float = self._clamp(self.default)
        self._listeners: List[Callable[[float, float], None]] = []

    def _clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, float(value)))

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, new_value: float) -> None:
        assert math.isfinite(new_value), f"{self.name}: non-finite value {new_value}"
        clamped = self._clamp(new_value)
        if clamped == self._value:
            return
        old = self._value
        self._value = clamped
        for listener in list(self._listeners):
            listener(clamped, old)

    def set_range(self, minimum: float, maximum: float) -> None:
        """Change the bounds and re-clamp the current value into them."""
        assert minimum <= maximum, f"{self.name}: empty range [{minimum}, {maximum}]"
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.value = self._value

    def link(self, listener: Callable[[float, float], None]) -> None:
        """Register a change listener (not called for the current value)."""
        self._listeners.append(listener)

    def unlink(self, listener: Callable[[float, float], None]) -> None:
        self._listeners.remove(listener)

    def reset(self) -> None:
        self.value = self.default

    def __float__(self) -> float:
        return self._value

    def __repr__(self) -> str:
        return (f"BoundedParameter({self.name!r}, value={self._value}, "
                f"range=[{self.minimum}, {self.maximum}])")
