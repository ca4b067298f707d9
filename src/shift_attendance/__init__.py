"""Shift attendance engine.

This package is organized by feature modules (users, attendance, ...)
with a thin Flask controller layer and service/repository layers.
"""
