"""프로젝트 설정 관리"""

from typing import Dict, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )
    """애플리케이션 설정

    CLI 에서만 참조한다. 라이브러리 클래스는 값을 명시적으로 전달받는다.
    """

    # API 설정
    API_BASE_URL: Optional[str] = None  # 없으면 명세서의 servers[0].url 사용
    API_TOKEN: Optional[str] = None
    API_HEADERS: Dict[str, str] = {}  # JSON 객체, 예: {"Notion-Version": "2022-06-28"}

    # HTTP 설정
    USER_AGENT: str = "openapi-http-client"
    REQUEST_TIMEOUT: float = 30.0  # seconds

    # 로깅
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def default_headers(self) -> Dict[str, str]:
        """모든 요청에 붙는 호출자 헤더 (인증, API 버전 고정 등)"""
        headers: Dict[str, str] = {}
        if self.API_TOKEN:
            headers["Authorization"] = f"Bearer {self.API_TOKEN}"
        headers.update(self.API_HEADERS)
        return headers


# 전역 설정 인스턴스
settings = Settings()
