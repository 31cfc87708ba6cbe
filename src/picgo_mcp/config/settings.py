from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    log_level: str = "INFO"

    # MCP server identity (advertised on initialize)
    server_name: str = "picgo-uploader"
    server_version: str = "0.1.0"
    server_instructions: str = "MCP server to upload images via PicGo"

    # PicGo HTTP server
    # PicGo's built-in server listens here when "Server" is enabled in its settings.
    upload_url: str = "http://127.0.0.1:36677/upload"
    # None -> no timeout of our own, urllib blocks until the socket settles
    request_timeout_seconds: Optional[float] = Field(default=None, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PICGO_MCP_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
