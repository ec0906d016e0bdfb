"""
API Package.

Contains the FastAPI application and routers.
"""
from issue_assistant.api.app import create_app, run_http_server

__all__ = ["create_app", "run_http_server"]
