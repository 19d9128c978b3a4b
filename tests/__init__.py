"""
Test suite for the audited calculator

Contains:
- tests/unit/          : Unit and scenario tests for individual modules
"""
