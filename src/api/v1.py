"""Centralized API router — all module routers are included here."""

from fastapi import APIRouter

from src.modules.chats.router import router as chats_router

api_router = APIRouter(prefix="/api")
api_router.include_router(chats_router)
