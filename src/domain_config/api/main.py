from fastapi import APIRouter

from domain_config.api.routes import configs, domains

api_router = APIRouter()
api_router.include_router(domains.router)
api_router.include_router(configs.router)
