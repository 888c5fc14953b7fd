"""
QR code 服務：產生讓參賽者掃描加入的網址與圖片

純計算邏輯，不涉及遊戲狀態
"""
import base64
import io
import re
import socket

import qrcode

_IPV4_PREFIX = re.compile(r"^\d+\.\d+\.\d+\.\d+")


def get_local_ip() -> str:
    """
    取得本機在區網上的 IPv4 位址

    UDP connect 不會真的送出封包，只是讓作業系統選出對外的網卡。
    找不到時退回 localhost。
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.connect(("8.8.8.8", 80))
            return sock.getsockname()[0]
        finally:
            sock.close()
    except OSError:
        try:
            ip = socket.gethostbyname(socket.gethostname())
        except OSError:
            return "localhost"
        return "localhost" if ip.startswith("127.") else ip


def resolve_join_url(host: str, scheme: str, port: int, public_url: str = "") -> str:
    """
    決定 QR code 要指向的網址

    規則：
    - 有設定 public_url 就直接使用
    - Host 是 localhost 或 IP（本機開發）時，改用區網 IP，手機才連得到
    - 其他情況（部署在反向代理後）使用請求本身的 scheme://host

    範例：
        resolve_join_url("localhost:3001", "http", 3001) -> "http://192.168.1.20:3001"
        resolve_join_url("buzz.example.com", "https", 3001) -> "https://buzz.example.com"
    """
    if public_url:
        return public_url.rstrip("/")

    if "localhost" in host or _IPV4_PREFIX.match(host):
        return f"http://{get_local_ip()}:{port}"

    return f"{scheme}://{host}"


def build_qr_data_url(data: str, box_size: int = 10, border: int = 2) -> str:
    """把字串編成 PNG QR code，返回 data URL"""
    qr = qrcode.QRCode(box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
