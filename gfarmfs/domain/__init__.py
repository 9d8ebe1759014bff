"""
数据模型模块 - 定义各种数据结构
"""

from .fs_path import FsPath
from .fs_permission import FsPermission
from .file_type import FileType
from .file_status import FileStatus
from .directory_listing import DirectoryListing
from .block_location import BlockLocation
from .gateway_msg import GatewayMsg
from .replication_outcome import ReplicationOutcome

__all__ = [
    'FsPath',
    'FsPermission',
    'FileType',
    'FileStatus',
    'DirectoryListing',
    'BlockLocation',
    'GatewayMsg',
    'ReplicationOutcome'
]
