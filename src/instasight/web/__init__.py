"""FastAPI web application."""
