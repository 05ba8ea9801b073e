from fastapi import APIRouter

from relay.features.chat.api import router as chat_router

api_router = APIRouter()
api_router.include_router(chat_router)
