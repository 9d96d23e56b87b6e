"""Salon payroll backend: commission tiers, bonuses and payroll lifecycle."""

__version__ = "1.0.0"
