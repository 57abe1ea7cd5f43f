"""Gremlin graph store helpers: observation import and streaming, hierarchy reads and retries."""

__version__ = "0.1.0"