"""
API 서버용 공통 런타임 유틸리티

- setup_logging(): config/logging.yml 로깅 설정을 불러오고, 없으면 기본 로깅으로 대체
- get_project_root(): 프로젝트 루트 경로 (labexplain 패키지의 상위 디렉터리)
"""
from __future__ import annotations

import logging
import logging.config
import os
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

# config/logging.yml 에서 propagate: false 로 고정된 애플리케이션 로거
APP_LOGGER = "labexplain"


def get_project_root() -> str:
    """프로젝트 루트의 절대 경로를 반환합니다(labexplain의 상위 디렉터리)."""
    here = os.path.dirname(__file__)
    # .../labexplain/api → 프로젝트 루트는 labexplain의 부모 디렉터리
    return os.path.abspath(os.path.join(here, "..", ".."))


def setup_logging(
    config_rel_path: str = os.path.join("config", "logging.yml"),
    level: Optional[str] = None,
) -> bool:
    """로깅 설정을 초기화합니다.

    - 프로젝트 루트 기준 `config/logging.yml` 파일이 있으면 이를 로드해 로깅을 구성합니다.
    - 없거나 형식이 잘못되었으면 기본 로깅 설정으로 대체합니다.

    Args:
        config_rel_path: 프로젝트 루트 기준 로깅 YAML 파일의 상대 경로.
        level: 루트 로거와 labexplain 로거 레벨 덮어쓰기 (예: "DEBUG")

    Returns:
        YAML 설정을 적용했으면 True, 기본 설정으로 대체했으면 False
    """
    cfg_path = os.path.join(get_project_root(), config_rel_path)
    applied = False
    if os.path.exists(cfg_path):
        try:
            yaml = YAML(typ="safe")
            with open(cfg_path, "r", encoding="utf-8") as f:
                data = yaml.load(f) or {}
            if isinstance(data, dict) and data:
                logging.config.dictConfig(data)
                applied = True
        except (OSError, ValueError, TypeError, YAMLError) as exc:
            # 설정 파일 오류 시 기본 로깅 설정으로 폴백
            logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
            logging.getLogger(__name__).warning("로깅 설정 로드 실패, 기본 설정 사용: %s", exc)
    if not applied:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    if level:
        for name in (None, APP_LOGGER):
            logging.getLogger(name).setLevel(level.upper())
    return applied
