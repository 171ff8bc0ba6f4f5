"""Test utilities for VerifierKit."""
