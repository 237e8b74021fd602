# =============================================================================
# core/ - Record Logic Package
# =============================================================================
# This package contains framework-agnostic record logic:
# - models/: Pydantic schemas for the stored records
# - services/: Record stores (validation + CRUD against Supabase)
#
# Code in this package should NOT read settings or build clients itself.
# Stores receive their database client from the caller, which keeps the
# logic testable against an in-memory backend.
# =============================================================================
