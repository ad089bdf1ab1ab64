from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import admin, auth, cron, purchases, webhooks
from .shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Diet Subscriptions API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(webhooks.router)
app.include_router(auth.router)
app.include_router(purchases.router)
app.include_router(cron.router)
app.include_router(admin.router)


@app.get("/health")
def health():
    return {"status": "ok"}
