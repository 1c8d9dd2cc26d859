"""Camunda Cloud console API client."""
