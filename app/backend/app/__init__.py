"""Worktime EVM backend application package."""
