"""Uniform read access to timetable data in folders, zip archives or memory."""

from __future__ import annotations

import enum
import hashlib
import io
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath


class DirType(enum.Enum):
    FILESYSTEM = "filesystem"
    ZIP = "zip"
    IN_MEMORY = "in_memory"


@dataclass
class File:
    """A named file; ``content`` is ``None`` when it does not exist."""

    name: str = ""
    content: str | None = None

    def has_value(self) -> bool:
        return self.content is not None

    def data(self) -> str:
        return "" if self.content is None else self.content


def _norm(path) -> str:
    p = str(PurePosixPath(str(path).replace("\\", "/")))
    return "" if p == "." else p.removeprefix("./")


def _digest(parts) -> int:
    h = hashlib.blake2b(digest_size=8)
    for part in parts:
        h.update(part if isinstance(part, bytes) else part.encode("utf-8", "surrogateescape"))
        h.update(b"\0")
    return int.from_bytes(h.digest(), "little")


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


class Dir(ABC):
    """Base class of all directories."""

    def __init__(self, path) -> None:
        self.path = Path(path)

    @abstractmethod
    def list_files(self, path) -> list[PurePosixPath]: ...

    @abstractmethod
    def get_file(self, path) -> File: ...

    @abstractmethod
    def exists(self, path) -> bool: ...

    @abstractmethod
    def file_size(self, path) -> int: ...

    @abstractmethod
    def type(self) -> DirType: ...

    @abstractmethod
    def hash(self) -> int: ...


class FsDir(Dir):
    """A directory on disk."""

    def _full(self, path) -> Path:
        return self.path / _norm(path)

    def list_files(self, path) -> list[PurePosixPath]:
        base = self._full(path)
        if base.is_file():
            return [PurePosixPath(_norm(path))]
        if not base.is_dir():
            return []
        return sorted(
            PurePosixPath(p.relative_to(self.path).as_posix())
            for p in base.rglob("*")
            if p.is_file()
        )

    def get_file(self, path) -> File:
        full = self._full(path)
        if not full.is_file():
            raise FileNotFoundError(str(full))
        return File(str(full), _decode(full.read_bytes()))

    def exists(self, path) -> bool:
        return self._full(path).exists()

    def file_size(self, path) -> int:
        return self._full(path).stat().st_size

    def type(self) -> DirType:
        return DirType.FILESYSTEM

    def hash(self) -> int:
        parts = []
        for p in self.list_files(""):
            parts += [str(p), self._full(p).read_bytes()]
        return _digest(parts)


class ZipDir(Dir):
    """A zip archive, given as a path or as raw bytes."""

    def __init__(self, source) -> None:
        if isinstance(source, (bytes, bytearray)):
            super().__init__("")
            self._raw = bytes(source)
        else:
            super().__init__(source)
            self._raw = Path(source).read_bytes()
        self._zip = zipfile.ZipFile(io.BytesIO(self._raw))
        self._names = {_norm(i.filename): i for i in self._zip.infolist() if not i.is_dir()}

    def list_files(self, path) -> list[PurePosixPath]:
        prefix = _norm(path)
        return sorted(
            PurePosixPath(n)
            for n in self._names
            if not prefix or n == prefix or n.startswith(prefix + "/")
        )

    def get_file(self, path) -> File:
        name = _norm(path)
        if name not in self._names:
            raise FileNotFoundError(name)
        return File(name, _decode(self._zip.read(self._names[name])))

    def exists(self, path) -> bool:
        name = _norm(path)
        return name in self._names or any(n.startswith(name + "/") for n in self._names)

    def file_size(self, path) -> int:
        name = _norm(path)
        if name not in self._names:
            raise FileNotFoundError(name)
        return self._names[name].file_size

    def type(self) -> DirType:
        return DirType.ZIP

    def hash(self) -> int:
        return _digest([self._raw])


class MemDir(Dir):
    """An in-memory directory mapping paths to text."""

    def __init__(self, files: dict | None = None) -> None:
        super().__init__("")
        self.files: dict[str, str] = {}
        for p, content in (files or {}).items():
            self.add(p, content)

    @classmethod
    def read(cls, text: str) -> "MemDir":
        """Build from text where each file starts with a ``# name`` line."""
        files: dict[str, list[str]] = {}
        current = None
        for line in text.splitlines():
            if line.startswith("# "):
                current = line[2:].strip()
                files[current] = []
            elif current is not None:
                files[current].append(line)
        return cls({n: "\n".join(ls).strip("\n") + "\n" for n, ls in files.items()})

    def add(self, path, content: str) -> "MemDir":
        self.files[_norm(path)] = content
        return self

    def list_files(self, path) -> list[PurePosixPath]:
        prefix = _norm(path)
        return sorted(
            PurePosixPath(n)
            for n in self.files
            if not prefix or n == prefix or n.startswith(prefix + "/")
        )

    def get_file(self, path) -> File:
        name = _norm(path)
        if name not in self.files:
            raise FileNotFoundError(name)
        return File(name, self.files[name])

    def exists(self, path) -> bool:
        name = _norm(path)
        return name in self.files or any(n.startswith(name + "/") for n in self.files)

    def file_size(self, path) -> int:
        return len(self.get_file(path).data().encode("utf-8", "surrogateescape"))

    def type(self) -> DirType:
        return DirType.IN_MEMORY

    def hash(self) -> int:
        parts = []
        for name in sorted(self.files):
            parts += [name, self.files[name]]
        return _digest(parts)


def make_dir(path) -> Dir:
    """Open a folder or a zip archive."""
    p = Path(path)
    if p.is_dir():
        return FsDir(p)
    if p.is_file() and zipfile.is_zipfile(p):
        return ZipDir(p)
    raise ValueError(f"cannot open {p} as a directory or zip archive")