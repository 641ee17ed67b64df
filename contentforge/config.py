"""Application configuration loaded from environment variables and .env file."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pipeline settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    SCHEMA_LOG_FILE: Optional[str] = None

    # 콘텐츠 정의 파일 루트 (kind별 하위 폴더)
    CONTENT_ROOT: str = "content"
    DEFINITION_NAMESPACE: str = "hammerstone"

    # 번들 호스트 설정
    DAY_LENGTH: float = 2880.0

    # 로드하지 않을 kind 이름 목록 (예: ["recipe"])
    DISABLED_KINDS: List[str] = []


settings = Settings()
