"""
基于HTTP网关的后端实现
通过Gfarm HTTP网关调用逐节点原语，网关地址来自配置或ZooKeeper

网关接口:
    GET  /fs/stat?path=             {"type", "size", "mtime", "owner", "group", "mode", "ncopy"}
    GET  /fs/readdir?path=          {"entries": [...]}，包含 . 和 ..
    GET  /fs/location?path=&offset=&length=   {"hosts": [...]}
    POST /fs/mkdir|rmdir|remove|rename|chmod|replicate
    POST /file/create
    GET  /file/read?path=&offset=&size=
    POST /file/write?path=&offset=
失败时返回 {"errno": n, "error": "..."}
"""

import errno
import logging
import os
import requests
import threading
from typing import Any, Dict, List, Optional
from gfarmfs.core.backend import GfarmBackend
from gfarmfs.core.fs_input_stream import FSInputStream
from gfarmfs.core.fs_output_stream import FSOutputStream
from gfarmfs.domain.file_type import FileType
from gfarmfs.exceptions import BackendIOError
from gfarmfs.util.configuration import (
    Configuration,
    DEFAULT_ZOOKEEPER_PATH,
    GATEWAY_URL_KEY,
    HTTP_MAX_RETRIES_KEY,
    HTTP_TIMEOUT_KEY,
    ZOOKEEPER_HOSTS_KEY,
    ZOOKEEPER_PATH_KEY,
    ZOOKEEPER_TIMEOUT_KEY,
)
from gfarmfs.util.http_client_util import HttpClientUtil, response_errno
from gfarmfs.util.zk_util import ZkUtil

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "http://localhost:8600"


class HttpGfarmBackend(GfarmBackend):
    """HTTP网关后端"""
    
    def __init__(self, gateway_url: Optional[str] = None, zk_util: Optional[ZkUtil] = None,
                 http_client: Optional[HttpClientUtil] = None):
        """
        初始化后端
        
        Args:
            gateway_url: 固定的网关地址，优先于ZooKeeper
            zk_util: 已连接的ZooKeeper工具，用于发现网关
            http_client: HTTP客户端
        """
        self.gateway_url: Optional[str] = gateway_url.rstrip('/') if gateway_url else None
        self.zk_util = zk_util
        self.http_client = http_client or HttpClientUtil()
        # 每个线程最近一次调用的错误码和网关描述
        self._last_error = threading.local()
    
    @classmethod
    def from_configuration(cls, conf: Configuration) -> 'HttpGfarmBackend':
        """
        根据配置创建后端
        
        配置了网关地址时直接使用；否则配置了ZooKeeper时连接ZooKeeper发现网关；
        都没有配置时使用默认网关地址
        """
        http_client = HttpClientUtil(
            max_retries=conf.get_int(HTTP_MAX_RETRIES_KEY, 3),
            timeout=conf.get_float(HTTP_TIMEOUT_KEY, 30)
        )
        gateway_url = conf.get(GATEWAY_URL_KEY)
        zk_hosts = conf.get(ZOOKEEPER_HOSTS_KEY)
        zk_util = None
        
        if not gateway_url and zk_hosts:
            zk_util = ZkUtil(
                hosts=zk_hosts,
                timeout=conf.get_float(ZOOKEEPER_TIMEOUT_KEY, 30),
                gateway_path=conf.get(ZOOKEEPER_PATH_KEY, DEFAULT_ZOOKEEPER_PATH)
            )
            zk_util.connect()
        elif not gateway_url:
            gateway_url = DEFAULT_GATEWAY_URL
        
        return cls(gateway_url=gateway_url, zk_util=zk_util, http_client=http_client)
    
    def _base_url(self) -> str:
        """获取网关地址，每次调用都重新解析以便感知网关切换"""
        if self.gateway_url:
            return self.gateway_url
        gateway = self.zk_util.get_gateway() if self.zk_util else None
        if not gateway:
            raise BackendIOError(errno.EHOSTUNREACH, "No available gateway")
        return gateway.get_url()
    
    def _call_remote(self, method: str, endpoint: str, **kwargs) -> 'requests.Response':
        """
        远程调用网关
        
        传输层异常统一转换为EIO
        """
        url = f"{self._base_url()}{endpoint}"
        try:
            if method == 'GET':
                return self.http_client.get(url, check_status=False, **kwargs)
            elif method == 'POST':
                return self.http_client.post(url, check_status=False, **kwargs)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")
        except requests.exceptions.RequestException as e:
            raise BackendIOError(errno.EIO, str(e)) from e
    
    def _remember_error(self, code: int, message: str):
        self._last_error.code = code
        self._last_error.message = message if code != 0 else ""
    
    def _call_errno(self, endpoint: str, payload: Dict[str, Any]) -> int:
        """调用修改类接口，返回错误码"""
        response = self._call_remote('POST', endpoint, json_data=payload)
        code, message = response_errno(response)
        self._remember_error(code, message)
        if code != 0:
            logger.debug(f"{endpoint} {payload} failed with errno {code}: {message}")
        return code
    
    def _query(self, endpoint: str, path: str, **params) -> Dict[str, Any]:
        """调用查询类接口，失败时抛出BackendIOError"""
        response = self._call_remote('GET', endpoint, params={"path": path, **params})
        code, message = response_errno(response)
        if code == 0 and not response.ok:
            code = errno.EIO
        self._remember_error(code, message)
        if code != 0:
            raise BackendIOError(code, message or self.get_error_string(code), path)
        return response.json()
    
    def _stat(self, path: str) -> Dict[str, Any]:
        return self._query("/fs/stat", path)
    
    def _stat_or_none(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            return self._stat(path)
        except BackendIOError as e:
            if e.code == errno.ENOENT:
                return None
            raise
    
    def exists(self, path: str) -> bool:
        return self._stat_or_none(path) is not None
    
    def is_file(self, path: str) -> bool:
        stat = self._stat_or_none(path)
        return stat is not None and FileType.get(stat.get("type", 0)) == FileType.FILE
    
    def is_directory(self, path: str) -> bool:
        stat = self._stat_or_none(path)
        return stat is not None and FileType.get(stat.get("type", 0)) == FileType.DIRECTORY
    
    def readdir(self, path: str) -> List[str]:
        return list(self._query("/fs/readdir", path).get("entries", []))
    
    def get_file_size(self, path: str) -> int:
        return int(self._stat(path).get("size", 0))
    
    def get_modification_time(self, path: str) -> int:
        return int(self._stat(path).get("mtime", 0))
    
    def get_owner(self, path: str) -> str:
        return self._stat(path).get("owner", "")
    
    def get_group(self, path: str) -> str:
        return self._stat(path).get("group", "")
    
    def get_permission(self, path: str) -> int:
        return int(self._stat(path).get("mode", 0))
    
    def get_replication(self, path: str) -> int:
        return int(self._stat(path).get("ncopy", 1))
    
    def mkdir(self, path: str, mode: int) -> int:
        return self._call_errno("/fs/mkdir", {"path": path, "mode": mode})
    
    def rmdir(self, path: str) -> int:
        return self._call_errno("/fs/rmdir", {"path": path})
    
    def remove(self, path: str) -> int:
        return self._call_errno("/fs/remove", {"path": path})
    
    def rename(self, src: str, dst: str) -> int:
        return self._call_errno("/fs/rename", {"src": src, "dst": dst})
    
    def set_permission(self, path: str, mode: int) -> int:
        return self._call_errno("/fs/chmod", {"path": path, "mode": mode})
    
    def get_data_location(self, path: str, start: int, length: int) -> List[str]:
        result = self._query("/fs/location", path, offset=start, length=length)
        return list(result.get("hosts", []))
    
    def replicate_to(self, path: str, host: str) -> int:
        return self._call_errno("/fs/replicate", {"path": path, "host": host})
    
    def open_read(self, path: str) -> FSInputStream:
        file_size = self.get_file_size(path)
        return FSInputStream(path, self._base_url(), file_size, self.http_client)
    
    def create_write(self, path: str, mode: int) -> FSOutputStream:
        code = self._call_errno("/file/create", {"path": path, "mode": mode})
        if code != 0:
            raise BackendIOError(code, self.get_error_string(code), path)
        return FSOutputStream(path, self._base_url(), self.http_client)
    
    def get_error_string(self, code: int) -> str:
        """
        错误码描述
        
        本线程上一次调用以同一错误码失败且网关给出了描述时返回该描述，
        否则返回系统的错误描述
        """
        code_seen = getattr(self._last_error, "code", 0)
        message = getattr(self._last_error, "message", "")
        if code_seen == code and message:
            return message
        return os.strerror(code)
    
    def close(self):
        """关闭HTTP会话和ZooKeeper连接"""
        self.http_client.close()
        if self.zk_util:
            self.zk_util.disconnect()
        logger.info("Closed HttpGfarmBackend")
