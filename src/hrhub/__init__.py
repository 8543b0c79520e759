"""HRHub records package.

Organized by feature modules (employees, attendance, leaves, promotions)
with a thin Flask controller layer over service/repository layers.
"""
