"""Dayflow HRMS package.

This package is organized by feature modules (users, attendance, leaves,
payroll, analytics, ...) with a thin Flask controller layer over service and
MongoDB repository layers. The ``sync`` module mirrors the primary store into
flat JSON files.
"""
