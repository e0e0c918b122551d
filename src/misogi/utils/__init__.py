"""Utility helpers for misogi."""
