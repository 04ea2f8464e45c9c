# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the supplier registration logic:
# - models/: Pydantic schemas for the form payload and the persisted record
# - services/: validation, file checks, rate limiting, storage, persistence,
#   notifications and the submission pipeline that ties them together
#
# HTTP concerns stay in app/; services receive their collaborators
# explicitly so they can be tested with fakes.
# =============================================================================
