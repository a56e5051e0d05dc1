"""HTTP surface: FastAPI app, engine manager and routes."""
