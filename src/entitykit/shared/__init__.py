"""Shared components for EntityKit.

This module contains shared utilities, types, and constants
used across the EntityKit package.
"""
