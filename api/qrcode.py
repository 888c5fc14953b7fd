"""
QR code Endpoint：讓參賽者用手機掃描加入
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

import logging

from config import Settings, get_settings
from schemas import QRCodeResponse
from services.qrcode_service import build_qr_data_url, resolve_join_url

router = APIRouter(tags=["qrcode"])
logger = logging.getLogger(__name__)


@router.get("/qrcode", response_model=QRCodeResponse)
def get_qrcode(request: Request, settings: Settings = Depends(get_settings)):
    """
    產生加入用的 QR code

    網址規則見 services.qrcode_service.resolve_join_url；
    反向代理後面用 X-Forwarded-Proto 判斷 http / https。

    返回：
        - qrcode: PNG data URL
        - url: QR code 內容
    """
    host = request.headers.get("host", "localhost")
    scheme = request.headers.get("x-forwarded-proto") or request.url.scheme or "http"
    url = resolve_join_url(host, scheme, settings.port, settings.public_url)

    try:
        data_url = build_qr_data_url(url, settings.qr_box_size, settings.qr_border)
    except Exception as e:
        logger.error(f"Failed to generate QR code for {url}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to generate QR code"})

    return QRCodeResponse(qrcode=data_url, url=url)
