# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the record stores:
# - test_models.py: Unit tests for Pydantic record validation
# - test_record_store.py: Generic CRUD contract against a fake backend
# - test_payment_service.py: Payment store helpers
# - test_user_supplement_service.py: User supplement store helpers
# - test_supabase_client.py: Backend error translation
# - test_bootstrap.py: Settings, logging and store wiring
#
# Run tests with: poetry run pytest
# =============================================================================
