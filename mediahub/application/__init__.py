"""Application layer - gallery business logic."""
