"""
FastAPI dependencies resolving per-application services from ``app.state``.
"""

from fastapi import Request

from ..services.auth_service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service
