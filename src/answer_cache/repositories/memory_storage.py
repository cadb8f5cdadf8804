"""In-memory implementation of DocumentStorage."""


class InMemoryDocumentStorage:
    """Keeps the document in a string and records every write.

    Used by the tests and by ``STORAGE_BACKEND=memory`` deployments that
    accept losing state on restart.
    """

    def __init__(self, content: str | None = None) -> None:
        self.content = content
        self.writes: list[str] = []
        self.reads = 0

    def read(self) -> str | None:
        self.reads += 1
        return self.content

    def write(self, content: str) -> None:
        self.content = content
        self.writes.append(content)

    def describe(self) -> str:
        return "memory"
