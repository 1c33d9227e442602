"""Circulars API application package."""
