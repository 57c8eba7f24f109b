# API Module - FastAPI routes for auth and credentials

from .main import create_app

__all__ = ["create_app"]
