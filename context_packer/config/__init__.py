"""Configuration for context packing."""
