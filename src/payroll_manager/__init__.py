"""Payroll Manager package.

Employee/Manager directory organized by feature modules (employees, managers,
security, notifications) with a thin Flask controller layer and
service/repository layers underneath.
"""
