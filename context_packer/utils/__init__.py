"""Helpers for turning pack results into model input."""
