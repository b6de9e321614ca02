# Middleware package init
"""
Fauna API: Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Deadline] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error reports
    2. Deadline: Fix the time budget for the request's store calls
    3. Logging: Log request details with the generated request ID
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
