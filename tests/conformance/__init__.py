"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the token.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Sum of balances equals total supply; supply within the schedule
2. atomicity.py - All-or-nothing operation semantics
3. emission_properties.py - Shape of the emission ceiling
4. gate_properties.py - One-way transfer gate and frozen grants

These tests use hypothesis for property-based testing.
"""
