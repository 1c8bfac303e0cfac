"""HR Portal package.

Feature modules (employees, attendance, timeoff) each carry a model, a
repository protocol with its MySQL implementation, a service and a thin
Flask controller. Access rules live in ``access``.
"""
