"""Payroll schemas module.

Import from ``payroll_schemas`` / ``error_schemas`` directly; the exception
module depends on ``error_schemas`` so nothing is re-exported here.
"""
