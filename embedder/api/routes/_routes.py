from fastapi import FastAPI

from embedder.api.routes.embed import router as embed_router
from embedder.api.routes.texts import router as texts_router


def register_routers(app: FastAPI):
    app.include_router(embed_router, tags=["Embed"])
    app.include_router(texts_router, tags=["Texts"])
