"""
Core domain models, mathematical primitives, and invariants.

This module contains the foundational building blocks of the schedule engine
(price lattice, compensated summation, error taxonomy, output records) that
are independent of any allocator or fee policy.
"""
