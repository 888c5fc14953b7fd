from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import logging
import os

from config import Settings, get_settings
from api import players, qrcode, rounds, websocket
from services.qrcode_service import get_local_ip

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 狀態全部在記憶體內，只需要印出連線網址
    port = app.state.settings.port
    ip = get_local_ip()
    logger.info(f"Server running at http://localhost:{port}")
    logger.info(f"Local network: http://{ip}:{port}")
    logger.info(f"Host page: http://{ip}:{port}/host.html")
    yield


def root():
    return {"message": "Buzzer Game API", "status": "ok"}


def health():
    return {"status": "healthy"}


def create_app(settings: Settings) -> FastAPI:
    """
    組裝 FastAPI app

    注意：
        - 有靜態頁面目錄時，/ 交給 StaticFiles 提供參賽者頁面（QR code 指向這裡）
        - 沒有時 / 才回傳 API 狀態 JSON
    """
    app = FastAPI(
        title="Buzzer Game API",
        description="Backend API for live buzz-in competitions",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(players.router)
    app.include_router(rounds.router)
    app.include_router(qrcode.router)
    app.include_router(websocket.router)

    app.add_api_route("/health", health, methods=["GET"])

    # 靜態頁面最後掛載，API routes 優先
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        app.add_api_route("/", root, methods=["GET"])

    return app


app = create_app(settings)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
