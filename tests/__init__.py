"""
Tests package for the FileDrop relay.

This package contains test suites organized by type:
- unit/: Fast tests per layer, no running app
- integration/: Full Flask app against a temporary storage directory
- property/: Hypothesis property-based tests
"""
