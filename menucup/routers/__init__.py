"""
HTTP routers. The public router must be included last.
"""

from menucup.routers import api, auth, dashboard, landing, public

__all__ = ["api", "auth", "dashboard", "landing", "public"]
