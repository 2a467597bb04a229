# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Gisabo API:
# - test_pricing.py, test_security.py: Pure unit tests
# - test_square_client.py, test_mailer.py, test_assistant.py: External
#   integrations with the network mocked out
# - test_*_api.py: Endpoint tests through FastAPI's TestClient against an
#   in-memory SQLite database
#
# Run tests with: pytest
# =============================================================================
