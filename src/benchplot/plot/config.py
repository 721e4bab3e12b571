"""Aesthetic bindings used to construct a Plot."""

from __future__ import annotations

from typing import Optional

from benchplot.errors import ConfigError
from benchplot.plot.aes import Aes, AesMap
from benchplot.plot.projection import FieldExpr, Projection


class PlotConfig:
    """Which projection feeds each aesthetic, and which axes are logarithmic.

    Every aesthetic starts unbound and linear.
    """

    def __init__(self) -> None:
        self.aes: AesMap[Projection] = AesMap(Projection())
        self.log_scale: AesMap[int] = AesMap(0)

    def set_iv(self, aes: Aes, iv: Optional[FieldExpr]) -> None:
        """Map independent variable iv to aesthetic aes. None unbinds aes."""
        self.aes.set(aes, Projection.for_iv(iv))

    def set_dv(self, aes: Aes) -> None:
        """Map the dependent variable (.value) to aesthetic aes."""
        self.aes.set(aes, Projection.for_dv())

    def set_log_scale(self, aes: Aes, base: int) -> None:
        """Use a log scale in the given base for aes. Base 0 means linear."""
        if base < 0 or base == 1:
            raise ConfigError(f"bad log-scale base {base} for {aes.short_name}")
        self.log_scale.set(aes, base)

    def __repr__(self) -> str:
        return f"PlotConfig(aes={self.aes!r}, log_scale={self.log_scale!r})"
