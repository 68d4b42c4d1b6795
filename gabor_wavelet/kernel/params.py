"""Wavelet parameter set and pre-flight validation."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping

import numpy as np

from gabor_wavelet.kernel.sigma import bandwidth_to_sigma

__all__ = ["InvalidParameterError", "WaveletParameters", "PARAMETER_KEYS"]


# Public (CLI/config) names; ``lambda`` maps to the ``lambda_`` field.
PARAMETER_KEYS = ("beta", "gamma", "theta", "lambda", "phi", "width", "height")


class InvalidParameterError(ValueError):
    """Raised when a parameter set cannot produce a well-defined kernel."""


def _to_single(value: float) -> float:
    return float(np.float32(value))


def _to_dimension(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}") from exc
    if not math.isfinite(number) or number != int(number):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class WaveletParameters:
    """
    Parameters of a 2-D Gabor wavelet sampled on a ``height x width`` grid.

    Parameters
    ----------
    beta : float
        Bandwidth in octaves.
    gamma : float
        Aspect ratio of the Gaussian envelope.
    theta : float
        Orientation to the horizontal (radians).
    lambda_ : float
        Wavelength of the carrier (pixels).
    phi : float
        Phase of the carrier (radians).
    width, height : int
        Grid dimensions (pixels).

    Construction accepts any numeric value; use :meth:`validate` to reject
    degenerate sets before generating a kernel.
    """

    beta: float = 2.0
    gamma: float = 1.0
    theta: float = 0.0
    lambda_: float = 50.0
    phi: float = 0.0
    width: int = 500
    height: int = 500

    @property
    def shape(self) -> tuple[int, int]:
        """Matrix shape as ``(rows, cols)``."""
        return self.height, self.width

    def single_precision(self) -> "WaveletParameters":
        """Return a copy with the real-valued fields rounded to float32."""

        return replace(
            self,
            beta=_to_single(self.beta),
            gamma=_to_single(self.gamma),
            theta=_to_single(self.theta),
            lambda_=_to_single(self.lambda_),
            phi=_to_single(self.phi),
        )

    def validate(self, strict: bool = False) -> None:
        """
        Pre-flight checks run before any work is scheduled.

        Grid dimensions are always checked. With ``strict=True`` the real
        parameters must be finite, the wavelength positive and the derived
        sigma finite (``beta == 1`` fails here).
        """

        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidParameterError(f"{name} must be positive, got {value}")
        if not strict:
            return

        for name in ("beta", "gamma", "theta", "lambda_", "phi"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name.rstrip('_')} must be finite, got {value}")
        if self.lambda_ <= 0:
            raise InvalidParameterError(f"lambda must be positive, got {self.lambda_}")

        sigma = bandwidth_to_sigma(self.beta, self.lambda_)
        if not math.isfinite(sigma):
            raise InvalidParameterError(
                f"beta={self.beta} gives a non-finite envelope width (sigma={sigma})"
            )

    def as_dict(self) -> Dict[str, Any]:
        """Parameters keyed by their public names."""
        values = asdict(self)
        values["lambda"] = values.pop("lambda_")
        return {key: values[key] for key in PARAMETER_KEYS}

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "WaveletParameters":
        """Build from a mapping keyed by public names; missing keys use defaults."""

        unknown = sorted(set(values) - set(PARAMETER_KEYS))
        if unknown:
            raise ValueError(f"Unknown wavelet parameter(s): {', '.join(unknown)}")
        kwargs: Dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            field_name = "lambda_" if key == "lambda" else key
            kwargs[field_name] = _to_dimension(key, value) if key in ("width", "height") else float(value)
        return cls(**kwargs)
