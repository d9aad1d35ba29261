# =============================================================================
# core/ - Business Logic
# =============================================================================
# - models/: Pydantic request/response schemas
# - services/: User CRUD, search filters and CSV export
# =============================================================================
