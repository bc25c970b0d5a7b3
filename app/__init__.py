# =============================================================================
# app/ - Relif HTTP API
# =============================================================================
# FastAPI surface over the repositories in core/:
# - main.py: app factory, CORS, RelifException / validation handlers
# - config.py: settings for the hosted backend and the legacy API
# - auth/: bearer token verification and the /auth endpoints
# - dependencies.py: per-request backend client and legacy client
# - routers/: one router per entity (beneficiaries, housings, cases, ...)
#
# Routes only build a repository and pass its ApiResponse status through.
# =============================================================================
