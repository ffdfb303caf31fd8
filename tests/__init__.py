"""
Test suite for Lens application.

Unit tests for models, services, UI components and the CLI live under tests/unit.
"""
