"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter
from datetime import datetime

from cartrewards import __version__
from cartrewards.api.stores import stores_router
from cartrewards.api.milestones import milestones_router
from cartrewards.api.cart_sessions import cart_sessions_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(stores_router)
api_router.include_router(milestones_router)
api_router.include_router(cart_sessions_router)

@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": __version__, "timestamp": datetime.now().isoformat()}
