import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecare.core.config import settings
from ecare.routers import complaints, notifications

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

OPENAPI_TAGS = [
    {
        "name": "Complaints",
        "description": "Register, forward, remark on and close repair complaints.",
    },
    {"name": "Notifications", "description": "Read and acknowledge workflow notifications."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Consumer repair complaint workflow. Tracks complaints from registration "
        "through technician assignment to closure and notifies every party involved."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

app.include_router(complaints.router, prefix="/v1/complaints", tags=["Complaints"])
app.include_router(notifications.router, prefix="/v1/notifications", tags=["Notifications"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
