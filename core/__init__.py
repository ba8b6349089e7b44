# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the memory wall business logic:
# - models/: Pydantic schemas for memories and photo uploads
# - services/: Validation, tenant resolution, storage and the workflow
#
# Services take their collaborators (repository, storage, clock) as
# constructor arguments so they can be tested without Supabase.
# =============================================================================
