"""Interfaces of the Core.

Structural contracts (Protocol) implemented by the adapters, so the pipeline
can be driven with fakes in tests.
"""
