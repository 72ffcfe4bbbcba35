"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services enforce tenant scoping, ownership and uniqueness rules, call
repositories for DB work and never commit; routers own the transaction.
"""
