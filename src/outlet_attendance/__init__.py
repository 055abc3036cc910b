"""Outlet attendance package.

Organized by feature modules (attendance, employees, schedules) around a small
attendance aggregate, with command/query handlers on top, MySQL adapters for the
repository ports and a thin Flask JSON controller layer.
"""
