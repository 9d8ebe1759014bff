"""
核心模块 - 后端抽象、适配层和文件流
"""

from .backend import GfarmBackend
from .http_backend import HttpGfarmBackend
from .path_resolver import PathResolver
from .replication_advisor import ReplicationAdvisor
from .gfarm_file_system import GfarmFileSystem
from .fs_input_stream import FSInputStream
from .fs_output_stream import FSOutputStream

__all__ = [
    'GfarmBackend',
    'HttpGfarmBackend',
    'PathResolver',
    'ReplicationAdvisor',
    'GfarmFileSystem',
    'FSInputStream',
    'FSOutputStream'
]
