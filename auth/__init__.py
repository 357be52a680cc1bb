"""auth/ -- Credential authentication package for AuthFlow.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/. api/ imports from auth/, not the other way around.
auth/dependencies.py is the bearer-token middleware the routes depend on, so
it imports fastapi. auth/service.py borrows only fastapi.concurrency to push
blocking store and bcrypt calls off the event loop.
"""
