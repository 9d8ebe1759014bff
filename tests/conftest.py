"""
测试公共夹具
提供一个记录调用顺序的内存后端
"""

import errno
import io
import json
import os
import posixpath
import pytest
import requests
from typing import Dict, List, Optional, Set, Tuple
from gfarmfs import Configuration, GfarmFileSystem
from gfarmfs.core.backend import GfarmBackend
from gfarmfs.exceptions import BackendIOError
from gfarmfs.util.configuration import WORKING_DIR_KEY

MUTATING_OPS = ("mkdir", "rmdir", "remove", "rename", "set_permission", "replicate_to", "create_write")


class _FakeWriter(io.BytesIO):
    """关闭时把内容提交到内存后端"""
    
    def __init__(self, backend: 'FakeBackend', path: str):
        super().__init__()
        self._backend = backend
        self._path = path
    
    def close(self):
        if not self.closed:
            self._backend.files[self._path] = self.getvalue()
        super().close()


class FakeBackend(GfarmBackend):
    """内存后端，记录每一次原语调用"""
    
    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.dirs: Set[str] = {"/"}
        self.modes: Dict[str, int] = {"/": 0o755}
        self.locations: Dict[str, List[str]] = {}
        self.calls: List[Tuple] = []
        self.failures: Dict[Tuple[str, str], int] = {}
        self.readdir_error: Optional[Exception] = None
        self.closed = False
    
    # 测试辅助方法
    
    def add_dir(self, path: str, mode: int = 0o755):
        parent = posixpath.dirname(path)
        if parent not in self.dirs:
            self.add_dir(parent)
        self.dirs.add(path)
        self.modes[path] = mode
    
    def add_file(self, path: str, data: bytes = b"", mode: int = 0o644,
                 hosts: Optional[List[str]] = None):
        parent = posixpath.dirname(path)
        if parent not in self.dirs:
            self.add_dir(parent)
        self.files[path] = data
        self.modes[path] = mode
        if hosts is not None:
            self.locations[path] = list(hosts)
    
    def mutations(self) -> List[Tuple]:
        return [call for call in self.calls if call[0] in MUTATING_OPS]
    
    def calls_of(self, op: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == op]
    
    def _record(self, op: str, *args) -> int:
        self.calls.append((op,) + args)
        return self.failures.get((op, args[0]), 0) if args else 0
    
    def _children(self, path: str) -> List[str]:
        names = []
        for candidate in list(self.dirs) + list(self.files):
            if candidate != "/" and posixpath.dirname(candidate) == path:
                names.append(posixpath.basename(candidate))
        return sorted(names)
    
    def _require(self, path: str):
        if path not in self.files and path not in self.dirs:
            raise BackendIOError(errno.ENOENT, os.strerror(errno.ENOENT), path)
    
    # 原语
    
    def exists(self, path):
        self._record("exists", path)
        return path in self.files or path in self.dirs
    
    def is_file(self, path):
        self._record("is_file", path)
        return path in self.files
    
    def is_directory(self, path):
        self._record("is_directory", path)
        return path in self.dirs
    
    def readdir(self, path):
        self._record("readdir", path)
        if self.readdir_error is not None:
            raise self.readdir_error
        if path not in self.dirs:
            raise BackendIOError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        return [".", ".."] + self._children(path)
    
    def get_file_size(self, path):
        self._require(path)
        return len(self.files.get(path, b""))
    
    def get_modification_time(self, path):
        self._require(path)
        return 1700000000000
    
    def get_owner(self, path):
        self._require(path)
        return "alice"
    
    def get_group(self, path):
        self._require(path)
        return "users"
    
    def get_permission(self, path):
        self._require(path)
        return self.modes.get(path, 0o644)
    
    def get_replication(self, path):
        self._require(path)
        return 2
    
    def mkdir(self, path, mode):
        code = self._record("mkdir", path, mode)
        if code:
            return code
        if path in self.dirs or path in self.files:
            return errno.EEXIST
        if posixpath.dirname(path) not in self.dirs:
            return errno.ENOENT
        self.dirs.add(path)
        self.modes[path] = mode
        return 0
    
    def rmdir(self, path):
        code = self._record("rmdir", path)
        if code:
            return code
        if path not in self.dirs:
            return errno.ENOENT
        if self._children(path):
            return errno.ENOTEMPTY
        self.dirs.discard(path)
        return 0
    
    def remove(self, path):
        code = self._record("remove", path)
        if code:
            return code
        if path not in self.files:
            return errno.ENOENT
        del self.files[path]
        return 0
    
    def rename(self, src, dst):
        code = self._record("rename", src, dst)
        if code:
            return code
        if src in self.files:
            self.files[dst] = self.files.pop(src)
            return 0
        if src in self.dirs:
            prefix = src + "/"
            self.dirs = {dst + d[len(src):] if d == src or d.startswith(prefix) else d for d in self.dirs}
            self.files = {dst + f[len(src):] if f.startswith(prefix) else f: data
                          for f, data in self.files.items()}
            return 0
        return errno.ENOENT
    
    def set_permission(self, path, mode):
        code = self._record("set_permission", path, mode)
        if code:
            return code
        if path not in self.files and path not in self.dirs:
            return errno.ENOENT
        self.modes[path] = mode
        return 0
    
    def get_data_location(self, path, start, length):
        self._record("get_data_location", path, start, length)
        return list(self.locations.get(path, ["gfsd0"]))
    
    def replicate_to(self, path, host):
        code = self._record("replicate_to", path, host)
        if code:
            return code
        self.locations.setdefault(path, ["gfsd0"]).append(host)
        return 0
    
    def open_read(self, path):
        self._record("open_read", path)
        return io.BytesIO(self.files[path])
    
    def create_write(self, path, mode):
        code = self._record("create_write", path, mode)
        if code:
            raise BackendIOError(code, self.get_error_string(code), path)
        self.files[path] = b""
        self.modes[path] = mode
        return _FakeWriter(self, path)
    
    def get_error_string(self, code):
        return os.strerror(code)
    
    def close(self):
        self.closed = True


@pytest.fixture
def backend():
    """内存后端，工作目录 /home/alice 已存在"""
    fake = FakeBackend()
    fake.add_dir("/home/alice")
    return fake


@pytest.fixture
def conf():
    return Configuration({WORKING_DIR_KEY: "/home/alice"})


@pytest.fixture
def fs(backend, conf):
    """基于内存后端的文件系统"""
    filesystem = GfarmFileSystem.get("gfarmfs:///", conf, backend)
    backend.calls.clear()
    return filesystem


@pytest.fixture
def make_response():
    """构造网关响应"""
    def _make(status: int = 200, body=None, content: bytes = None):
        response = requests.Response()
        response.status_code = status
        response.encoding = "utf-8"
        if content is not None:
            response._content = content
        else:
            response._content = json.dumps(body if body is not None else {}).encode("utf-8")
        return response
    return _make
