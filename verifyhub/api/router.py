from fastapi import APIRouter

from verifyhub.api.routes import admin, bot, exchange, pages, system

# Exchange endpoint and page views live at the site root.
root_router = APIRouter()
root_router.include_router(exchange.router, tags=["oauth-exchange"])
root_router.include_router(pages.router, tags=["pages"])

api_router = APIRouter()
api_router.include_router(system.router, prefix="/system", tags=["system"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(bot.router, prefix="/bot", tags=["bot-simulator"])
