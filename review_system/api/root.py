from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Review System Backend",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }
