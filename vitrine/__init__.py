"""Perfume and brand catalog browsing core."""
