"""eazy-ci: containerized CI/CD pipelines driven by ``eazy.yml``."""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.4.0"
