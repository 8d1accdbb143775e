"""Command handlers for flyctl"""

from .roots import AddRootHandler, RemoveRootHandler, ListRootsHandler
from .index import ReindexHandler, CountHandler, ResetHandler
from .query import QueryHandler
from .init import InitHandler

__all__ = [
    'AddRootHandler',
    'RemoveRootHandler',
    'ListRootsHandler',
    'ReindexHandler',
    'CountHandler',
    'ResetHandler',
    'QueryHandler',
    'InitHandler',
]
