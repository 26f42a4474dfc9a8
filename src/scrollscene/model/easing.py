from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict

import numpy as np
import matplotlib.pyplot as plt

if TYPE_CHECKING:
    import numpy.typing as npt

# ==========================================
# ABSTRACT CLASS FOR EASING CURVES
# ==========================================
class Easing(ABC):
    """
    Abstract base class for easing curves.

    An easing maps normalized time in [0, 1] to normalized progress.
    Every curve must return exactly 0.0 at t=0 and exactly 1.0 at t=1,
    the timeline relies on it for exact boundary values.
    """
    NAME: str = "Easing"

    def __call__(self, t: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        if isinstance(t, np.ndarray):
            return self.ease(np.clip(t, 0.0, 1.0))
        return float(self.ease(min(1.0, max(0.0, float(t)))))

    @abstractmethod
    def ease(self, t: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
        """
        Evaluate the curve.

        Args:
            t: Normalized time, already clipped to [0, 1].

        Returns:
            Eased progress.
        """
        pass

    def plot(self) -> None:
        """
        Plot the easing curve.
        """
        t = np.linspace(0.0, 1.0, 200)
        values = self(t)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(5, 5))

        plt.plot(t, values, 'b', lw=2)
        plt.plot([0, 1], [0, 1], color='gray', lw=0.5, linestyle=':')

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.NAME} easing")
        plt.xlabel("Time (normalized)")
        plt.ylabel("Progress")
        plt.show()


class Linear(Easing):
    NAME = "none"

    def ease(self, t):
        return t


class PowerIn(Easing):
    """Polynomial ease-in, ``power1`` is quadratic."""

    def __init__(self, power: int) -> None:
        self.power = power
        self.NAME = f"power{power}.in"

    def ease(self, t):
        return t ** (self.power + 1)


class PowerOut(Easing):
    def __init__(self, power: int) -> None:
        self.power = power
        self.NAME = f"power{power}.out"

    def ease(self, t):
        return 1.0 - (1.0 - t) ** (self.power + 1)


class PowerInOut(Easing):
    def __init__(self, power: int) -> None:
        self.power = power
        self.NAME = f"power{power}.inOut"

    def ease(self, t):
        exponent = self.power + 1
        first = (2.0 * t) ** exponent / 2.0
        second = 1.0 - (2.0 * (1.0 - t)) ** exponent / 2.0
        if isinstance(t, np.ndarray):
            return np.where(t < 0.5, first, second)
        return first if t < 0.5 else second


class SineIn(Easing):
    NAME = "sine.in"

    def ease(self, t):
        if isinstance(t, np.ndarray):
            return 1.0 - np.cos(t * np.pi / 2.0)
        return 1.0 - math.cos(t * math.pi / 2.0) if t < 1.0 else 1.0


class SineOut(Easing):
    NAME = "sine.out"

    def ease(self, t):
        if isinstance(t, np.ndarray):
            return np.sin(t * np.pi / 2.0)
        return math.sin(t * math.pi / 2.0) if t < 1.0 else 1.0


class SineInOut(Easing):
    NAME = "sine.inOut"

    def ease(self, t):
        if isinstance(t, np.ndarray):
            return -(np.cos(np.pi * t) - 1.0) / 2.0
        return -(math.cos(math.pi * t) - 1.0) / 2.0


def _build_registry() -> Dict[str, Easing]:
    registry: Dict[str, Easing] = {"none": Linear(), "linear": Linear()}
    for power in range(1, 5):
        for curve in (PowerIn(power), PowerOut(power), PowerInOut(power)):
            registry[curve.NAME] = curve
        # bare "powerN" means the out variant
        registry[f"power{power}"] = registry[f"power{power}.out"]
    for curve in (SineIn(), SineOut(), SineInOut()):
        registry[curve.NAME] = curve
    return registry


EASINGS: Dict[str, Easing] = _build_registry()

# Tweens that do not name an easing use this one
DEFAULT_EASING = "power1.out"


def get_easing(name: str | None) -> Easing:
    """Resolve an easing by name; ``None`` resolves to the default curve."""
    if name is None:
        name = DEFAULT_EASING
    try:
        return EASINGS[name]
    except KeyError:
        raise ValueError(f"Unknown easing: {name!r}") from None
