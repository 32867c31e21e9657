"""
Admin Blueprint

Authenticated content management console mounted at ``/admin``.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from portfolio.admin import routes, screens  # noqa: E402, F401
