# salon_backend/modules/payroll/routes/__init__.py

"""
Payroll API routes.
"""

from .error_handlers import register_payroll_exception_handlers
from .payroll_routes import router

__all__ = ["router", "register_payroll_exception_handlers"]
