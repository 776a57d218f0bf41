"""
Unit tests for individual components.

This package contains unit tests for:
- Naming rules and the rule set
- Date extraction and OCR digit correction
- Filename generation and collision suffixes
- Year/month directory placement
- Content extractors, validation, configuration and reports
"""
