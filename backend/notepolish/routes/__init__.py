# Routes package init
"""
NotePolish Backend - API Routes Package
=========================================

Route Inventory:
    - ai.py:      POST /api/beautify, POST /api/summarize
    - notes.py:   POST /api/save, GET /api/notes
    - auth.py:    POST /api/auth/register, POST /api/auth/login, GET /api/auth/me
    - health.py:  GET /, GET /health

Handlers stay thin: pull fields off the request, call a service, wrap the
result. Errors surface as NotePolishError subclasses.
"""
