"""Allocation algorithms."""
