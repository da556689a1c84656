from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.api.health import router as health_router
from app.api.root import router as root_router
from app.api.forms import router as forms_router
from app.api.submissions import router as submissions_router
from app.api.analytics import router as analytics_router

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="FormPilot")

# CORS middleware for the builder frontend and embedded forms
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(forms_router)
app.include_router(submissions_router)
app.include_router(analytics_router)
