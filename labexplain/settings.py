"""애플리케이션 설정 관리"""

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# .env 파일 로드
load_dotenv()

# 프로젝트 루트 디렉토리
ROOT_DIR = Path(__file__).parent.parent


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # LLM 설정
    llm_provider: Literal["openai", "anthropic", "dummy"] = Field(
        default="openai", description="LLM 제공자 (openai | anthropic | dummy)"
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API 키")
    anthropic_api_key: str | None = Field(default=None, description="Anthropic API 키")

    # 모델 설정
    openai_model: str = Field(default="gpt-4o", description="OpenAI 모델명")
    anthropic_model: str = Field(
        default="claude-3-5-sonnet-20241022", description="Anthropic 모델명"
    )
    llm_temperature: float = Field(default=0.1, description="설명 생성 temperature")
    llm_max_tokens: int = Field(default=3500, description="설명 생성 최대 토큰 수")

    # PDF 조각 좌표 설정
    pdf_unit_scale: float = Field(
        default=16.0, description="PDF 포인트 → 조각 좌표 단위 변환 비율"
    )
    reassembly_y_factor: int = Field(default=10, description="y 좌표 양자화 배율")
    reassembly_line_threshold: int = Field(
        default=4, description="새 라인으로 판단하는 양자화 y 차이 임계값"
    )

    # 노이즈 필터 설정
    noise_strategies: str = Field(
        default="pattern,prefix", description="적용할 노이즈 필터 전략 (pattern,prefix)"
    )
    prefix_window_tokens: int = Field(default=100, description="반복 헤더 비교 토큰 수")
    prefix_min_tokens: int = Field(default=10, description="반복 헤더로 인정할 최소 토큰 수")
    min_text_length: int = Field(default=50, description="분석 가능한 최소 텍스트 길이")

    # 서버 설정
    server_host: str = Field(default="127.0.0.1", description="HTTP 서버 호스트")
    server_port: int = Field(default=3001, description="HTTP 서버 포트")

    # 앱 설정
    app_debug: bool = Field(default=False, description="디버그 모드")
    log_level: str = Field(default="INFO", description="로그 레벨")
    max_upload_size_mb: int = Field(default=50, description="최대 업로드 크기 (MB)")
    brand_name: str = Field(default="Avencio Health", description="보고서 머리글 브랜드명")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def noise_strategy_names(self) -> list[str]:
        """쉼표로 구분된 전략 이름 목록"""
        return [s.strip().lower() for s in self.noise_strategies.split(",") if s.strip()]


# 전역 설정 인스턴스
settings = Settings()


def validate_settings() -> dict[str, str]:
    """설정 유효성 검사 및 경고 메시지 반환"""
    warnings = {}

    # LLM 설정 검증
    if settings.llm_provider == "openai":
        if not settings.openai_api_key:
            warnings["llm"] = "OpenAI API 사용을 위해서는 OPENAI_API_KEY가 필요합니다."
    elif settings.llm_provider == "anthropic":
        if not settings.anthropic_api_key:
            warnings["llm"] = (
                "Anthropic API 사용을 위해서는 ANTHROPIC_API_KEY가 필요합니다."
            )

    # 노이즈 필터 전략 검증
    unknown = [s for s in settings.noise_strategy_names if s not in ("pattern", "prefix")]
    if unknown:
        warnings["noise_filter"] = f"알 수 없는 노이즈 필터 전략: {', '.join(unknown)}"

    return warnings
