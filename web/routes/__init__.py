"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정 생성/조회
- transactions: 거래 게시/거래별 분개 조회
- entries: 분개 항목 조회
- ledger: 정합성 검사
"""
