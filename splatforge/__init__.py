"""Gaussian splat training helpers: COLMAP readers, scene geometry, scaled Adam, image samples, refinement statistics and shader-name demangling."""

__version__ = "0.1.0"