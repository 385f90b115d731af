"""Utility helpers shared across the service."""
