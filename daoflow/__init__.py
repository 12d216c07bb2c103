"""Simulation primitives for energy, fields and resonance, with in-memory services."""

__version__ = "0.1.0"