"""
Access to the application's query cache from request handlers.
"""

from flask import current_app

from orderly_shared.query_cache import QueryCache


def query_cache() -> QueryCache:
    return current_app.extensions["query_cache"]
