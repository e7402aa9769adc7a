"""
시드 작업 커스텀 예외 클래스
- 단계(phase)별 표준화된 에러
- 상위 핸들러에서 로그로만 보고
"""


class SeedError(Exception):
    """시드 작업 기본 예외"""

    def __init__(self, message: str, phase: str = None, details: dict = None):
        self.message = message
        self.phase = phase
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "phase": self.phase,
            "details": self.details
        }


class ConfigError(SeedError):
    """환경 변수 설정 오류"""

    def __init__(self, message: str, variable: str = None, details: dict = None):
        super().__init__(message, phase="config", details=details)
        self.variable = variable


class SchemaProvisionError(SeedError):
    """인덱스 삭제/생성 실패"""

    def __init__(self, message: str, index: str = None, details: dict = None):
        super().__init__(message, phase="schema", details=details)
        self.index = index


class SourceReadError(SeedError):
    """관계형 DB 조회 실패"""

    def __init__(self, message: str, query: str = None, details: dict = None):
        super().__init__(message, phase="source", details=details)
        self.query = query


class BulkIndexError(SeedError):
    """Bulk 인덱싱 실패 (일부 문서 실패 포함)"""

    def __init__(self, message: str, failures: list = None, details: dict = None):
        super().__init__(message, phase="bulk", details=details)
        self.failures = failures or []


class TeardownError(SeedError):
    """연결 종료 실패"""

    def __init__(self, resource: str, cause: Exception = None):
        super().__init__(
            message=f"{resource} 연결 종료 실패: {cause}",
            phase="teardown",
            details={"resource": resource}
        )
        self.resource = resource
        self.cause = cause
