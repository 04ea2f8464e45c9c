# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Supplier Registration API:
# - test_validation.py: Field rules and error collection
# - test_file_inspector.py: File size/type checks and storage keys
# - test_rate_limiter.py: In-memory and Redis submission counters
# - test_notifications.py: Email templates, escaping and the Resend client
# - test_pipeline.py: Full submissions against in-memory fakes
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
