"""
Byte source services.

Single Responsibility: turn caller input into a random-access reader.
"""
import asyncio
import mimetypes
from pathlib import Path
from typing import Optional, Union
import aiofiles

from ...logging import get_logger

UploadInput = Union[bytes, bytearray, memoryview, str, Path]

DEFAULT_MEDIA_TYPE = 'application/octet-stream'


class MemorySource:
    """In-memory byte source."""

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = bytes(data)

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def media_type(self) -> Optional[str]:
        return None

    async def read(self, start: int, end: int) -> bytes:
        return self._data[start:end]

    async def close(self) -> None:
        pass


class FileSource:
    """
    File-backed byte source.

    Uses aiofiles for non-blocking I/O. The file handle is opened lazily and
    kept open for the whole upload; concurrent readers are serialized since
    seek and read are separate awaits.
    """

    def __init__(self, file_path: Path):
        """
        Args:
            file_path: Path to the file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        self._path = path
        self._size = path.stat().st_size
        self._file_handle = None
        self._lock = asyncio.Lock()
        self._logger = get_logger('taisdk.upload.file')

    @property
    def path(self) -> Path:
        return self._path

    @property
    def size(self) -> int:
        return self._size

    @property
    def media_type(self) -> Optional[str]:
        return mimetypes.guess_type(self._path.name)[0]

    async def read(self, start: int, end: int) -> bytes:
        """Read [start, end) from the file."""
        async with self._lock:
            if self._file_handle is None:
                self._file_handle = await aiofiles.open(self._path, 'rb')
            await self._file_handle.seek(start)
            data = await self._file_handle.read(end - start)
        self._logger.debug(f"Read chunk: {start}-{end} ({len(data)} bytes)")
        return data

    async def close(self) -> None:
        """Close the file handle if open."""
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None


def open_source(source: UploadInput) -> Union[MemorySource, FileSource]:
    """
    Normalize supported inputs to a byte source.

    Strings are encoded as UTF-8; paths are read lazily from disk.

    Raises:
        TypeError: For unsupported input types
    """
    if isinstance(source, Path):
        return FileSource(source)
    if isinstance(source, str):
        return MemorySource(source.encode('utf-8'))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return MemorySource(source)
    raise TypeError(
        f"Unsupported input type {type(source).__name__}. "
        "Provide bytes, bytearray, memoryview, str or pathlib.Path."
    )
