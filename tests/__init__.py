# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Relif data layer:
# - fakes.py: In-memory stand-in for the hosted backend client
# - test_models.py: Unit tests for Pydantic model validation
# - test_transforms.py / test_stats.py: Row transforms and dashboard counters
# - test_*_repository.py: Repository behavior against the in-memory backend
# - test_clients.py / test_fallback.py: Client plumbing and legacy fallback
# - test_routes.py: HTTP API through FastAPI's TestClient
#
# Run tests with: poetry run pytest
# =============================================================================
