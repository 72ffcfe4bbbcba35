"""레포지토리 패키지 — 데이터 접근 계층.

Repositories package — Data access layer. Each module exposes singleton
repository instances built on BaseRepository.
"""
