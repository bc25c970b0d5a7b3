# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - organizations.py: Organizations, invites and requests
# - users.py: Organization members and platform staff
# - beneficiaries.py: Beneficiaries, allocation and history
# - housings.py: Housings and their rooms (spaces)
# - cases.py: Cases, case notes and case documents
# - inventory.py: Product types, stock movements and donations
# - volunteers.py: Volunteers
#
# Each router is mounted in main.py under /api/v1.
# =============================================================================

from . import health
from . import organizations
from . import users
from . import beneficiaries
from . import housings
from . import cases
from . import inventory
from . import volunteers

__all__ = [
    "health",
    "organizations",
    "users",
    "beneficiaries",
    "housings",
    "cases",
    "inventory",
    "volunteers",
]
