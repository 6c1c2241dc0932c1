"""Organized test fixtures."""
