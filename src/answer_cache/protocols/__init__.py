"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the durable backend (file -> Redis -> memory) without touching services
- Unit testing with in-memory implementations

Usage:
    ```python
    from answer_cache.protocols import DocumentStorage

    storage: DocumentStorage = JsonFileStorage("data/gpt-cache.json")
    ```
"""

from .document_storage import DocumentStorage

__all__ = [
    "DocumentStorage",
]
