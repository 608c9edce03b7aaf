"""Test execution lifecycle and suite aggregation service."""
