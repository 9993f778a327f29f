"""Stat card computation, configuration operations and render projection."""
