"""HTTP layer: FastAPI application and per-entity routers."""
