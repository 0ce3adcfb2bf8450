"""
Trackly backend
Project and task tracking over a GraphQL API
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
