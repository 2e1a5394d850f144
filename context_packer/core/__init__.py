"""Core packing pipeline: measurement, scoring, packing, constraints and placement."""
