"""Core utilities for macutils."""
