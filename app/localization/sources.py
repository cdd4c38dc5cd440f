"""Byte sources that supply translation file content.

A source answers "give me the bytes of this name" and returns None when it
has nothing; a missing file is a normal outcome, not an error.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from core.logging import get_module_logger

logger = get_module_logger()


class ByteSource(ABC):
    """Abstract base for byte sources."""

    @abstractmethod
    def load(self, name: str, origin: Optional[str] = None) -> Optional[bytes]:
        """Load the content of a named file or resource.

        Args:
            name: File name or relative path.
            origin: Name of the file that referenced this one; its directory
                is searched as well.

        Returns:
            The content, or None when nothing was found.
        """
        pass


class FileSystemSource(ByteSource):
    """Reads files from disk.

    Search order: the name itself when it is absolute, then each configured
    directory, then the directory of the origin file, then the current
    working directory.

    Attributes:
        directories: Directories searched before the origin directory.
    """

    def __init__(self, directories: Union[str, Path, Iterable[Union[str, Path]], None] = None):
        if directories is None:
            self.directories: List[str] = []
        elif isinstance(directories, (str, Path)):
            self.directories = [str(directories)] if str(directories) else []
        else:
            self.directories = [str(d) for d in directories if str(d)]

    def candidates(self, name: str, origin: Optional[str] = None) -> List[str]:
        if os.path.isabs(name):
            return [name]
        paths = [os.path.join(directory, name) for directory in self.directories]
        if origin:
            origin_dir = os.path.dirname(origin)
            if origin_dir:
                paths.append(os.path.join(origin_dir, name))
        paths.append(os.path.join(os.getcwd(), name))
        return paths

    def load(self, name: str, origin: Optional[str] = None) -> Optional[bytes]:
        if not name:
            return None
        for path in self.candidates(name, origin):
            if not os.path.isfile(path):
                continue
            try:
                content = Path(path).read_bytes()
            except OSError as e:
                logger.warning("translation_file_read_failed", path=path, error=str(e))
                continue
            logger.debug("translation_file_read", path=path, size=len(content))
            return content
        return None


class MappingSource(ByteSource):
    """Serves in-memory or embedded content by name.

    Names are matched exactly first, then by their base name, so
    "locales/strings_de.ini" can be served from "strings_de.ini".
    """

    def __init__(self, files: Mapping[str, Union[bytes, str]]):
        self.files = {
            name: content.encode("utf-8") if isinstance(content, str) else content
            for name, content in files.items()
        }

    def load(self, name: str, origin: Optional[str] = None) -> Optional[bytes]:
        if name in self.files:
            return self.files[name]
        return self.files.get(os.path.basename(name))


class ChainSource(ByteSource):
    """Asks several sources in turn and returns the first hit."""

    def __init__(self, *sources: ByteSource):
        self.sources = list(sources)

    def load(self, name: str, origin: Optional[str] = None) -> Optional[bytes]:
        for source in self.sources:
            content = source.load(name, origin)
            if content is not None:
                return content
        return None
