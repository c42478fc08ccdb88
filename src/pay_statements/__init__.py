"""Contractor pay statements: biweekly periods, summary derivation, export and upload."""

__version__ = "0.1.0"
