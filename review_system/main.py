import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from review_system.api.auth import router as auth_router
from review_system.api.departments import router as departments_router
from review_system.api.errors import register_exception_handlers
from review_system.api.health import router as health_router
from review_system.api.organizations import router as organizations_router
from review_system.api.root import router as root_router
from review_system.api.users import router as users_router
from review_system.core.config import settings
from review_system.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

if not settings.RESTRICT_STRUCTURE_MUTATIONS:
    logger.warning(
        "Organization and department writes are open to every authenticated user; "
        "set RESTRICT_STRUCTURE_MUTATIONS=true to limit them to HR_ADMIN/SYSTEM_ADMIN"
    )

app = FastAPI(title="Review System")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(organizations_router)
app.include_router(departments_router)
app.include_router(users_router)
