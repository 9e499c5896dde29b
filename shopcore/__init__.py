"""Catalog, browsing and cart state for the laptop shop."""
