"""Inbox service package initializer.

Ensures the local ``inbox`` package is treated as a regular package instead of
falling back to namespace package resolution.
"""
