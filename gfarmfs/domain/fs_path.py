"""
逻辑路径类
文件系统接口层面的路径，可以是相对路径，也可以带有scheme和authority
"""

import re
from typing import Optional, Union

_SEPARATOR = "/"
_DUPLICATE_SEPARATORS = re.compile(r"/{2,}")


def _normalize(path: str) -> str:
    """合并重复的分隔符并去掉末尾的分隔符，不处理 . 和 .."""
    path = _DUPLICATE_SEPARATORS.sub(_SEPARATOR, path)
    if len(path) > 1 and path.endswith(_SEPARATOR):
        path = path[:-1]
    return path


class FsPath:
    """逻辑路径，不可变，按规范化后的字符串比较"""

    __slots__ = ("_scheme", "_authority", "_path")

    def __init__(self, path_string: str):
        """
        解析路径字符串

        Args:
            path_string: 形如 /a/b、a/b 或 gfarmfs://host/a/b 的路径
        """
        if not path_string:
            raise ValueError("Can not create a Path from an empty string")

        scheme = None
        authority = None
        rest = path_string

        # 第一个 / 之前出现的 : 视为scheme分隔符
        colon = path_string.find(":")
        slash = path_string.find(_SEPARATOR)
        if colon != -1 and (slash == -1 or colon < slash):
            scheme = path_string[:colon]
            rest = path_string[colon + 1:]

        # 只有带scheme时才解析authority，否则开头的 // 按重复分隔符处理
        if scheme is not None and rest.startswith("//"):
            end = rest.find(_SEPARATOR, 2)
            if end == -1:
                authority, rest = rest[2:], ""
            else:
                authority, rest = rest[2:end], rest[end:]

        if not rest:
            rest = _SEPARATOR

        self._scheme: Optional[str] = scheme
        self._authority: Optional[str] = authority
        self._path: str = _normalize(rest)

    @classmethod
    def from_parts(cls, scheme: Optional[str], authority: Optional[str], path: str) -> 'FsPath':
        """由scheme、authority和路径部分直接构造"""
        instance = cls.__new__(cls)
        instance._scheme = scheme
        instance._authority = authority
        instance._path = _normalize(path) if path else _SEPARATOR
        return instance

    @classmethod
    def of(cls, path: Union[str, 'FsPath']) -> 'FsPath':
        """接受字符串或FsPath"""
        if isinstance(path, FsPath):
            return path
        return cls(path)

    def get_scheme(self) -> Optional[str]:
        return self._scheme

    def get_authority(self) -> Optional[str]:
        return self._authority

    def get_uri_path(self) -> str:
        """获取去掉scheme和authority后的路径部分"""
        return self._path

    def is_absolute(self) -> bool:
        return self._path.startswith(_SEPARATOR)

    def is_root(self) -> bool:
        return self._path == _SEPARATOR

    def get_name(self) -> str:
        """获取最后一级名称，根目录返回空字符串"""
        return self._path[self._path.rfind(_SEPARATOR) + 1:]

    def get_parent(self) -> Optional['FsPath']:
        """
        获取父路径

        Returns:
            父路径，根目录或单级相对路径返回None
        """
        if self.is_root():
            return None
        last_slash = self._path.rfind(_SEPARATOR)
        if last_slash == -1:
            return None
        parent = self._path[:last_slash] or _SEPARATOR
        return FsPath.from_parts(self._scheme, self._authority, parent)

    def child(self, child: Union[str, 'FsPath']) -> 'FsPath':
        """
        以当前路径为父路径解析子路径

        子路径本身是绝对路径或带scheme时直接返回子路径，
        否则拼接到当前路径之后，并沿用当前路径的scheme和authority
        """
        child = FsPath.of(child)
        if child.get_scheme() is not None:
            return child
        if child.is_absolute():
            return FsPath.from_parts(self._scheme, self._authority, child.get_uri_path())
        base = self._path.rstrip(_SEPARATOR)
        return FsPath.from_parts(self._scheme, self._authority,
                                 f"{base}{_SEPARATOR}{child.get_uri_path()}")

    def with_child_name(self, name: str) -> 'FsPath':
        """追加一级名称，名称按字面处理，不解析scheme"""
        base = self._path.rstrip(_SEPARATOR)
        return FsPath.from_parts(self._scheme, self._authority, f"{base}{_SEPARATOR}{name}")

    def with_scheme_and_authority(self, scheme: Optional[str], authority: Optional[str]) -> 'FsPath':
        return FsPath.from_parts(scheme, authority, self._path)

    def __truediv__(self, child: Union[str, 'FsPath']) -> 'FsPath':
        return self.child(child)

    def __str__(self):
        result = ""
        if self._scheme is not None:
            result += f"{self._scheme}:"
        if self._authority is not None:
            result += f"//{self._authority}"
        return result + self._path

    def __repr__(self):
        return f"FsPath('{self}')"

    def __eq__(self, other):
        if not isinstance(other, FsPath):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self):
        return hash(str(self))
