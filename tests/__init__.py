"""Test suite for FluentForms.

This package contains tests for:
- Field construction, name and label resolution
- Honeypot guard ordering and timing
- Validation engine rules and short-circuiting
- State machine transitions (valid and invalid)
- Form aggregate lifecycle, mail delivery, rendering and the HTTP adapter
- End-to-end submission scenarios
"""
