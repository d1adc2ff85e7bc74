"""Core gameplay primitives (win detection and the shared clock).

Kept free of FastAPI and Redis concerns so it can be reused by the server, the
client session and tests.
"""
