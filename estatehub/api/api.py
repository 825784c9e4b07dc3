"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from estatehub.api.endpoints import auth, catalog, contacts, health, listings

api_router = APIRouter()

# Register, login, logout, current session
api_router.include_router(auth.router)

# Popular + search across the three listing kinds
api_router.include_router(listings.router)

# Property / project / land detail pages
api_router.include_router(catalog.router)

# Contact form and agent contact
api_router.include_router(contacts.router)

api_router.include_router(health.router)
