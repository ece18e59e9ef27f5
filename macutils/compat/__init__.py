"""Installer compatibility for the host hardware."""
from macutils.compat.model_year import ModelCompatibilityEngine, installable_versions_for

__all__ = ['ModelCompatibilityEngine', 'installable_versions_for']
