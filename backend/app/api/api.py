from fastapi import APIRouter
from app.api.endpoints import auth, projects, mcp_servers, secrets, documents

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(mcp_servers.router, prefix="/mcp", tags=["mcp"])
api_router.include_router(secrets.router, prefix="/secrets", tags=["secrets"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
