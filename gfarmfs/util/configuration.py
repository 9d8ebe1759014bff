"""
配置类
使用 fs.gfarm.* 形式的点分键名保存配置项，取值时按需转换类型
"""

import getpass
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

WORKING_DIR_KEY = "fs.gfarm.workingDir"
BLOCK_SIZE_KEY = "fs.gfarm.block.size"
REPLICATION_ENABLED_KEY = "fs.gfarm.replication.enabled"
REPLICATION_DESTINATIONS_KEY = "fs.gfarm.replication.destinations"
REPLICATION_WAIT_KEY = "fs.gfarm.replication.wait"
REPLICATION_WAIT_INTERVAL_KEY = "fs.gfarm.replication.wait.interval.ms"
REPLICATION_WAIT_TIMEOUT_KEY = "fs.gfarm.replication.wait.timeout.ms"
GATEWAY_URL_KEY = "fs.gfarm.gateway.url"
ZOOKEEPER_HOSTS_KEY = "fs.gfarm.zookeeper.hosts"
ZOOKEEPER_PATH_KEY = "fs.gfarm.zookeeper.path"
ZOOKEEPER_TIMEOUT_KEY = "fs.gfarm.zookeeper.timeout"
HTTP_TIMEOUT_KEY = "fs.gfarm.http.timeout"
HTTP_MAX_RETRIES_KEY = "fs.gfarm.http.max.retries"

KNOWN_KEYS = (
    WORKING_DIR_KEY,
    BLOCK_SIZE_KEY,
    REPLICATION_ENABLED_KEY,
    REPLICATION_DESTINATIONS_KEY,
    REPLICATION_WAIT_KEY,
    REPLICATION_WAIT_INTERVAL_KEY,
    REPLICATION_WAIT_TIMEOUT_KEY,
    GATEWAY_URL_KEY,
    ZOOKEEPER_HOSTS_KEY,
    ZOOKEEPER_PATH_KEY,
    ZOOKEEPER_TIMEOUT_KEY,
    HTTP_TIMEOUT_KEY,
    HTTP_MAX_RETRIES_KEY,
)

DEFAULT_BLOCK_SIZE = 32 * 1024 * 1024
DEFAULT_ZOOKEEPER_PATH = "/gfarm/gateways"

_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0")


def default_working_dir() -> str:
    """默认工作目录 /home/<当前用户>"""
    return f"/home/{getpass.getuser()}"


def env_name(key: str) -> str:
    """配置键对应的环境变量名，例如 fs.gfarm.workingDir -> FS_GFARM_WORKINGDIR"""
    return key.replace('.', '_').upper()


class Configuration:
    """
    配置类

    只负责保存和转换，不缓存派生值，调用方每次使用时重新读取
    """
    
    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        """
        初始化配置
        
        Args:
            values: 初始配置项
        """
        self._values: Dict[str, Any] = dict(values or {})
    
    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 keys: Iterable[str] = KNOWN_KEYS) -> 'Configuration':
        """
        从环境变量读取已知配置项
        
        Args:
            environ: 环境变量表，默认为 os.environ
            keys: 需要读取的配置键
        """
        environ = os.environ if environ is None else environ
        values = {}
        for key in keys:
            name = env_name(key)
            if name in environ:
                values[key] = environ[name]
        logger.debug(f"Loaded {len(values)} settings from environment")
        return cls(values)
    
    def set(self, key: str, value: Any):
        """设置配置项"""
        self._values[key] = value
    
    def unset(self, key: str):
        self._values.pop(key, None)
    
    def get(self, key: str, default: Any = None) -> Any:
        """获取原始值"""
        return self._values.get(key, default)
    
    def get_strings(self, key: str, default: Optional[List[str]] = None) -> Optional[List[str]]:
        """
        获取字符串列表
        
        字符串值按逗号分隔，去掉首尾空白和空项
        
        Returns:
            字符串列表，未配置时返回default
        """
        value = self._values.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            items = value.split(',')
        else:
            items = [str(item) for item in value]
        return [item.strip() for item in items if item.strip()]
    
    def get_boolean(self, key: str, default: bool = False) -> bool:
        """获取布尔值，无法识别的取值返回default"""
        value = self._values.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        logger.warning(f"Invalid boolean for {key}: {value!r}, using {default}")
        return default
    
    def get_int(self, key: str, default: int = 0) -> int:
        """获取整数值"""
        value = self._values.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
            return default
    
    def get_float(self, key: str, default: float = 0.0) -> float:
        """获取浮点值"""
        value = self._values.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid float for {key}: {value!r}, using {default}")
            return default
    
    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)
    
    def __contains__(self, key):
        return key in self._values
    
    def __str__(self):
        return f"Configuration{{{self._values}}}"
    
    def __repr__(self):
        return self.__str__()
