"""Staffing back-office package.

Feature modules (jobs, attendance, payroll, invoices, ...) each keep a thin Flask
controller layer on top of service and repository layers. The compensation
calculator and the invoice aggregator are pure and can be used without Flask.
"""
