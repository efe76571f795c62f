import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formcraft.config import settings
from formcraft.routers.forms import router as forms_router
from formcraft.routers.submissions import router as submissions_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="FormCraft Backend (FastAPI + Mongo)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(forms_router)
app.include_router(submissions_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
