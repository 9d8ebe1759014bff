"""
gfarmfs - Gfarm分布式文件系统的层次文件系统接口
在Gfarm后端原语之上提供 open/create/delete/rename/list/stat/mkdirs 等操作
"""

__version__ = "1.0.0"
__author__ = "gfarmfs Team"

from .core.gfarm_file_system import GfarmFileSystem
from .core.backend import GfarmBackend
from .core.http_backend import HttpGfarmBackend
from .domain.fs_path import FsPath
from .domain.fs_permission import FsPermission
from .domain.file_status import FileStatus
from .domain.directory_listing import DirectoryListing
from .domain.block_location import BlockLocation
from .domain.replication_outcome import ReplicationOutcome
from .util.configuration import Configuration

__all__ = [
    'GfarmFileSystem',
    'GfarmBackend',
    'HttpGfarmBackend',
    'FsPath',
    'FsPermission',
    'FileStatus',
    'DirectoryListing',
    'BlockLocation',
    'ReplicationOutcome',
    'Configuration'
]
