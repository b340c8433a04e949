from fastapi import APIRouter

from alteran.api.routes import auth, generate, github, health, projects, revalidate, settings, uploads

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(github.router, prefix="/github", tags=["github"])
api_router.include_router(generate.router, prefix="/generate", tags=["generate"])
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(revalidate.router, tags=["revalidate"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
