"""HTTP API 패키지 (Starlette)"""
