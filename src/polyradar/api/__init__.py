"""FastAPI backend: scan, health, config and trade endpoints."""
