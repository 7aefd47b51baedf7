"""Core gameplay primitives (scoring, formatting, weighted selection, tracked effects).

Kept free of FastAPI and Redis concerns so it can be reused by the reducer, the API and tests.
"""
