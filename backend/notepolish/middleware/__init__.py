# Middleware package init
"""
NotePolish Backend - Middleware Package
=========================================

Request path through the stack:

    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - rate_limit.py:  per-IP sliding window, 429 + Retry-After
    - request_id.py:  X-Request-ID correlation id (ContextVar + response header)
    - logging.py:     one access-log line per request
    - auth.py:        bearer-token dependency for protected routes (not ASGI
                      middleware; declared per route)
"""
