import asyncio
import os

from pathlib import Path

from src.presentation.interfaces.protocols import IFileSource


class LocalFile(IFileSource):
    """
    A file on disk. Size comes from stat, content is read off the event loop.
    """
    def __init__(self, path: str):
        self._path = Path(path)

    @property
    def name(self) -> str:
        return self._path.name

    @property
    def size(self) -> int:
        return os.stat(self._path).st_size

    async def read_bytes(self) -> bytes:
        return await asyncio.to_thread(self._path.read_bytes)


class InMemoryFile(IFileSource):
    """A file whose content is already in memory (drag-and-drop, tests)."""
    def __init__(self, name: str, data: bytes):
        self._name = name
        self._data = data

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return len(self._data)

    async def read_bytes(self) -> bytes:
        return self._data
