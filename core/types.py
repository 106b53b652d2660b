"""
타입 정의 모듈

애플리케이션 공통 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class StoreBackend(str, Enum):
    """Ledger 저장소 구현체 선택"""

    MEMORY = "memory"
    SQLITE = "sqlite"
