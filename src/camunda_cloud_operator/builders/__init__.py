"""Builders for credentials, sessions and lifecycle executors."""
