"""
Property-based tests for the afuc decoder and listing passes.

Strategies live in ``strategies``; the fast lane runs with every test
session and the ``slow`` marked variants widen the example counts.
"""
