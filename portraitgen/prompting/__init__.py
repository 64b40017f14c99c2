"""Prompting package.

This package contains the deterministic prompt template used for generation
requests. It does not perform validation or model invocation.
"""
