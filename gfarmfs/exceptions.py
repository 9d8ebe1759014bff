"""
异常定义
文件系统接口对外抛出的所有错误类型
"""

from typing import Optional


class GfarmFSError(IOError):
    """gfarmfs错误基类"""


class PathNotFoundError(GfarmFSError, FileNotFoundError):
    """路径不存在"""

    def __init__(self, path):
        super().__init__(f"File does not exist: {path}")
        self.path = path


class PathExistsError(GfarmFSError, FileExistsError):
    """路径已存在且不允许覆盖"""

    def __init__(self, path):
        super().__init__(f"File already exists: {path}")
        self.path = path


class DirectoryNotEmptyError(GfarmFSError):
    """非递归删除非空目录"""

    def __init__(self, path):
        super().__init__(f"Directory {path} is not empty.")
        self.path = path


class UnsupportedOperationError(GfarmFSError):
    """后端没有对应的原语"""

    def __init__(self, operation: str):
        super().__init__(f"Not supported: {operation}")
        self.operation = operation


class BackendIOError(GfarmFSError):
    """
    后端原语返回了非零错误码

    同时携带原始错误码和后端给出的错误描述，调用方按类型而不是按数字判断
    """

    def __init__(self, code: int, error_string: str, path: Optional[str] = None):
        message = error_string if path is None else f"{error_string}: {path}"
        super().__init__(message)
        self.code = code
        self.error_string = error_string
        self.path = path


class ReplicationDegradedError(GfarmFSError):
    """副本迁移失败，只在副本顾问内部使用，不会抛给调用方"""


class InitializationError(GfarmFSError):
    """无法建立后端连接或解析工作目录"""


class WrongFileSystemError(ValueError):
    """路径属于其他文件系统"""

    def __init__(self, path, expected_uri):
        super().__init__(f"Wrong FS: {path}, expected: {expected_uri}")
        self.path = path
        self.expected_uri = expected_uri
