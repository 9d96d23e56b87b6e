# salon_backend/modules/payroll/__init__.py

"""
Payroll Module - commission tiers, bonuses and the payroll record lifecycle.

- Performance tier resolution from monthly appointment counts
- Revenue and bonus aggregation per staff member and period
- Payroll calculation and batch processing for all active staff
- Approve / mark-paid transitions guarding signed-off records

Routers live in ``salon_backend.modules.payroll.routes``.
"""

__version__ = "1.0.0"
