from fastapi import APIRouter

from remixflow.api.routes import content, provenance, remixes, royalties, users, utils

api_router = APIRouter()
api_router.include_router(utils.router, tags=["utils"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(content.router, prefix="/content", tags=["content"])
api_router.include_router(remixes.router, prefix="/remixes", tags=["remixes"])
api_router.include_router(royalties.router, prefix="/royalties", tags=["royalties"])
api_router.include_router(provenance.router, prefix="/provenance", tags=["provenance"])
