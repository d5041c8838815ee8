"""Operator scripts for the CosmWasm platform contract."""

__version__ = "0.1.0"
