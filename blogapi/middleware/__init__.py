"""
Blog API — Middleware Package
===============================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID first so the access log line carries the correlation ID
    2. Logging measures duration and records the final status
    3. CORS is FastAPI's CORSMiddleware
"""
