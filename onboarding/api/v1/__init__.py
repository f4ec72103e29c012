"""
API v1 package.

Contains versioned API routes for the affiliate registration API.
"""

from onboarding.api.v1.routes import router

__all__ = ["router"]
