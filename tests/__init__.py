"""
Test suite for isotemporal

Contains:
- tests/unit/          : Unit tests for individual modules
"""
