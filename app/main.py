from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.config import settings
from app.config.logging_config import configure_logging
from app.endpoints import analytics, entry
from app.services.attendance_service import shutdown_attendance_service

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    shutdown_attendance_service()


app = FastAPI(title="Control de presencia", lifespan=lifespan)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Incluir routers
app.include_router(entry.router)
app.include_router(analytics.router)


@app.get("/")
def root():
    return {
        "message": "API de presencia funcionando!",
        "backend": settings.PRESENCE_BACKEND,
    }


def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
