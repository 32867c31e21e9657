"""
Public Site Blueprint

The one-page portfolio, the contact form and the page-view beacon.
"""

from flask import Blueprint

site_bp = Blueprint('site', __name__)

from portfolio.site import routes  # noqa: E402, F401
