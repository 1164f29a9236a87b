import io
import zipfile
from pathlib import PurePosixPath

import pytest

from transitkit.directory import DirType, File, FsDir, MemDir, ZipDir, make_dir


def _zip_bytes(files):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as z:
        for name, content in files.items():
            z.writestr(name, content)
    return buf.getvalue()


def test_file_without_content():
    f = File("x")
    assert not f.has_value()
    assert f.data() == ""


def test_mem_dir_basics():
    d = MemDir({"a/b.txt": "hello"})
    assert d.exists("a/b.txt")
    assert d.exists("./a/b.txt")
    assert not d.exists("c.txt")
    assert d.get_file("a/b.txt").data() == "hello"
    assert d.file_size("a/b.txt") == len("hello")
    assert d.type() is DirType.IN_MEMORY


def test_mem_dir_add_and_list():
    d = MemDir().add("x/1.txt", "a").add("x/2.txt", "b").add("y.txt", "c")
    assert d.list_files("x") == [PurePosixPath("x/1.txt"), PurePosixPath("x/2.txt")]


def test_mem_dir_read_sections():
    d = MemDir.read("# one.txt\na,b\n1,2\n\n# two.txt\nz\n")
    assert d.get_file("one.txt").data() == "a,b\n1,2\n"
    assert d.get_file("two.txt").data() == "z\n"


def test_mem_dir_hash_depends_on_content():
    assert MemDir({"a": "1"}).hash() == MemDir({"a": "1"}).hash()
    assert MemDir({"a": "1"}).hash() != MemDir({"a": "2"}).hash()


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        MemDir().get_file("nope")


def test_fs_dir(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "f.txt").write_text("data")
    d = make_dir(tmp_path)
    assert isinstance(d, FsDir)
    assert d.exists("sub/f.txt")
    assert d.get_file("sub/f.txt").data() == "data"
    assert d.list_files("sub") == [PurePosixPath("sub/f.txt")]
    assert d.file_size("sub/f.txt") == 4


def test_zip_dir_from_bytes():
    d = ZipDir(_zip_bytes({"stops.txt": "s", "x/y.txt": "yy"}))
    assert d.type() is DirType.ZIP
    assert d.get_file("x/y.txt").data() == "yy"
    assert d.file_size("x/y.txt") == 2
    assert d.list_files("x") == [PurePosixPath("x/y.txt")]
    assert not d.exists("other.txt")


def test_make_dir_zip(tmp_path):
    p = tmp_path / "feed.zip"
    p.write_bytes(_zip_bytes({"a.txt": "1"}))
    d = make_dir(p)
    assert d.type() is DirType.ZIP
    assert d.get_file("a.txt").data() == "1"


def test_make_dir_invalid(tmp_path):
    with pytest.raises(ValueError):
        make_dir(tmp_path / "missing")