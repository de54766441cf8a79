"""kitstage - stage architecture-scoped package kits and index them."""

__version__ = "0.1.0"
