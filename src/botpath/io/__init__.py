"""Readers and writers for path logs, spline saves and compiled-model sources."""
