# Media Gallery Test Suite
"""
Test suite for the media gallery.

- unit: normalizer, pagination and infinite scroll logic in isolation
- integration: the HTTP API over a real (temporary) SQLite database
"""
