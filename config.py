from functools import lru_cache
from typing import Annotated
import json

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from models import DuplicateNamePolicy


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    # NoDecode：環境變數原樣交給 _parse_cors，不先當 JSON 解析
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    # reject: 名稱已被其他連線使用時拒絕
    # takeover: 新連線直接接手該名稱（舊版行為）
    duplicate_name_policy: DuplicateNamePolicy = DuplicateNamePolicy.REJECT

    # 留空則依請求的 Host header 推算 QR code 網址
    public_url: str = ""
    qr_box_size: int = 10
    qr_border: int = 2

    static_dir: str = "public"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        """接受 JSON list 或逗號分隔字串"""
        if isinstance(v, str):
            if v.strip().startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
