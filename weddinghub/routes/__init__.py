"""
Routes package - contains all Flask blueprints
"""
from .auth_routes import bp as auth_bp
from .vendor_routes import bp as vendor_bp
from .admin_routes import bp as admin_bp
from .customer_routes import bp as customer_bp
from . import health

__all__ = ['auth_bp', 'vendor_bp', 'admin_bp', 'customer_bp', 'health']
