"""
Test suite for dlmm-bcurve

Contains:
- tests/unit/          : Unit tests for individual modules and the schedule pipeline
"""
