# Services package init
"""
NotePolish Backend - Services Layer
=====================================

Completion pipeline (bottom-up):
    - llm_base.CompletionProvider:         one raw chat-completion round trip
    - openrouter_service.OpenRouterProvider: the OpenRouter implementation
    - invocation:    deadline race + structural validation of one attempt
    - retry:         IDLE → ATTEMPT_1 → RETRY_PENDING → ATTEMPT_2 → DONE
    - segmenter:     summary text → {summaryText, takeaways}
    - pipeline.NotesPipeline: beautify (one attempt) / summarize (retry + segment)

Persistence and accounts:
    - note_service.NoteService: save and list notes
    - auth_service.AuthService: register, login, me; token helpers
"""
