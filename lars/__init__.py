"""LARS asset repository client and upload engine."""

__version__ = "0.1.0"
