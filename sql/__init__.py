# PostgreSQL source readers
"""
관계형 DB 조회 모듈

- db_connector: asyncpg 커넥션 풀 생성
- models: 게시물 원본 레코드
- post_reader: 게시물 페이지 조회 (연관 데이터 포함)
- user_reader: username 전체 조회
"""
