# Integration Tests
"""
Integration tests verify gallery behavior through the HTTP API.

Principle: Test behavior, not implementation.
"""
