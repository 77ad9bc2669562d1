"""Utility helpers for vault2gm."""
