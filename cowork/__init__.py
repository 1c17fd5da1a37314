"""Cowork team collaboration backend."""
