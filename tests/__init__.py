"""
Test suite for the calculator core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
