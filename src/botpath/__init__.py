"""botpath – turn recorded or authored paths into compilable tube models."""

from __future__ import annotations

from .pipeline import BuildIssue, ModelBuild, generate_from_spline, generate_model

__all__ = ["__version__", "BuildIssue", "ModelBuild", "generate_from_spline", "generate_model"]

__version__ = "0.1.0"
