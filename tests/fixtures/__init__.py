"""Shared test fixtures package.

Provides reusable helpers for all test suites: an in-memory CloudFormation
client and a progress sink that records what a stack operation reported.
"""
