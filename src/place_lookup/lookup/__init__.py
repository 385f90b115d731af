"""Lookup and photo proxy request handling."""
