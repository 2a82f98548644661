"""
Request dependencies shared by the routers
"""

from fastapi import Request

from smartdoc.config import Services


def get_services(request: Request) -> Services:
    """Return the clients built at startup (stored on app.state by main.py)."""
    return request.app.state.services
