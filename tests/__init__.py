"""Test suite for TickerLens.

This package contains hermetic tests following the pytest framework.
Test modules mirror the tickerlens/ package one-to-one for discoverability.

Testing Philosophy:
    - Use pytest-mock for browser and network isolation
    - Focus coverage on extraction fallbacks, classification and valuation
    - Avoid external dependencies - all I/O should be mocked
"""
