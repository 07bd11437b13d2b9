"""
Django Signals for Wellness Goals

This package contains signal handlers for automatic updates:
- Profile creation for new users
"""

# Import signals so they register when Django loads
from . import profile_signals  # noqa
