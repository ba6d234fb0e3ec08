"""
Library Catalog Models.

Pydantic models for the catalog entities. These provide:

1. Field-level validation using Pydantic v2
2. Conversion from SQLAlchemy rows (``from_attributes``)
3. JSON serialization for the server surface

The models represent:
- Book: Catalog items
- Member: Registered library members
"""

from .book import Book
from .member import Member

__all__ = [
    "Book",
    "Member",
]
