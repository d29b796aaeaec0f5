"""Gravitational lens physics."""

from solarlens.physics.lens import GravitationalLens, PSFKernel

__all__ = ["GravitationalLens", "PSFKernel"]
