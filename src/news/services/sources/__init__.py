"""
News provider adapters
Each adapter handles querying and record mapping for a specific news API
"""

from .base import NewsSourceAdapter
from .gnews_adapter import GNewsAdapter
from .mediastack_adapter import MediaStackAdapter
from .newsapi_adapter import NewsAPIAdapter
from .newsdata_adapter import NewsDataAdapter
from .registry import ADAPTER_TYPES, SourceRegistry, create_adapter, default_catalogue

__all__ = [
    'NewsSourceAdapter',
    'NewsAPIAdapter',
    'GNewsAdapter',
    'MediaStackAdapter',
    'NewsDataAdapter',
    'SourceRegistry',
    'ADAPTER_TYPES',
    'create_adapter',
    'default_catalogue',
]
