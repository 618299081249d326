"""
Test support utilities for proactor tests.

Helpers that don't fit as pytest fixtures but are shared across test files.
"""
