"""Shared pytest fixtures for PLAUDIT tests."""
