"""Utility functions for the Camunda Cloud Operator."""
