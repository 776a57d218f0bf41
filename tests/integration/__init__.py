"""
Integration tests for system components.

This package contains integration tests for:
- End-to-end organization of a directory
- Concurrent renames and moves into shared folders
"""
