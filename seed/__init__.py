# Post search seed job
"""
검색/자동완성 초기 데이터 시드 작업

- config: 환경 변수 설정
- errors: 단계별 예외
- teardown: 외부 연결 종료
- main: 진입점 (python -m seed)
"""
