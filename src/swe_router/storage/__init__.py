"""Persistence for run history."""
