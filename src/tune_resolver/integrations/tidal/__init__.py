"""
Tidal integration package.
"""
from .auth import TidalAuth
from .client import TidalService
from .search import TidalCatalog

__all__ = ['TidalAuth', 'TidalService', 'TidalCatalog']
