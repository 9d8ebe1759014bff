"""
工具模块 - 配置、HTTP客户端和ZooKeeper工具
"""

from .configuration import Configuration
from .http_client_util import HttpClientUtil
from .zk_util import ZkUtil

__all__ = [
    'Configuration',
    'HttpClientUtil',
    'ZkUtil'
]
