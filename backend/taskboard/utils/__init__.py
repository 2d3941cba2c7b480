"""Utility helpers for the task board."""
