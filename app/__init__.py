# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# HTTP layer of the supplier registration service:
# - main.py: App entry point, CORS, error handlers, logging setup
# - config.py: Environment-driven settings
# - exceptions.py: Tagged submission errors and their JSON envelope
# - dependencies.py: Pipeline wiring (overridable in tests)
# - routers/: Registration form and health endpoints
#
# Request handling stays thin; the submission itself runs in core/.
# =============================================================================
