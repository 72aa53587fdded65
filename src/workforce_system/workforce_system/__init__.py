"""Workforce System package.

Feature modules (attendance, breaks, leaves, payroll, wifi, users, ...) each
keep a domain model, a repository interface with its MySQL implementation,
a service holding the business rules and a thin Flask controller.
"""
