# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Memory Wall API:
# - test_memory_validation.py: Photo/title/date/description checks
# - test_tenant_resolver.py: College id resolution order
# - test_memory_wall_service.py: Workflow against in-memory fakes
# - test_supabase_client.py: Query construction
# - test_memory_wall_routes.py: HTTP endpoints via TestClient
# - test_storage_service.py: Photo storage calls
# - test_auth.py: JWT claims
# - test_config.py / test_models.py: Settings and Pydantic models
#
# Run tests with: pytest
# =============================================================================
