# =============================================================================
# core/ - Data Layer Package
# =============================================================================
# This package contains the framework-agnostic data layer:
# - models/: Pydantic schemas, enums and response envelopes
# - transforms.py: raw row -> schema transformations
# - stats.py: dashboard counters computed from rows
# - repositories/: one repository class per entity
#
# Code in this package should NOT import from FastAPI routers.
# This keeps the logic testable and reusable.
# =============================================================================
