"""Workforce Pay package.

Attendance & compensation engine organized by feature modules (attendance,
breaks, payroll, salary_history, leave, wifi, users) with a thin Flask
controller layer and service/repository layers underneath.
"""
