"""HRMS backend package.

Organized by feature modules (users, employees, attendance, leaves) with a
thin Flask controller layer on top of service/repository layers.
"""
