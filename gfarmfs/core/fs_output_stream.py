"""
文件输出流类
缓冲写入数据并按偏移量提交到网关
"""

import errno
import hashlib
import logging
import requests
from typing import Optional
from gfarmfs.exceptions import BackendIOError
from gfarmfs.util.http_client_util import HttpClientUtil, response_errno

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 1024 * 1024


class FSOutputStream:
    """文件输出流类，绑定到一个规范路径"""
    
    def __init__(self, path: str, base_url: str, http_client: Optional[HttpClientUtil] = None,
                 buffer_size: int = DEFAULT_BUFFER_SIZE):
        """
        初始化文件输出流
        
        Args:     
            path: 规范路径
            base_url: 网关地址
            http_client: HTTP客户端
            buffer_size: 缓冲区大小，写满后提交
        """
        self.path = path
        self.base_url = base_url
        self.http_client = http_client or HttpClientUtil()
        self.current_position = 0
        self.bytes_written = 0
        self.md5_hash = hashlib.md5()
        self._buffer = bytearray()
        self._buffer_size = buffer_size
        self._closed = False
    
    def write(self, data: bytes) -> int:
        """
        写入数据
        
        Args:
            data: 要写入的数据
            
        Returns:
            写入的字节数
        """
        if self._closed:
            raise ValueError("Stream is closed")
        
        if not data:
            return 0
        
        self.md5_hash.update(data)
        self._buffer += data
        self.bytes_written += len(data)
        
        if len(self._buffer) >= self._buffer_size:
            self.flush()
        return len(data)
    
    def write_string(self, text: str, encoding: str = 'utf-8') -> int:
        """
        写入字符串
        
        Args:
            text: 要写入的字符串
            encoding: 编码格式
        """
        return self.write(text.encode(encoding))
    
    def flush(self):
        """刷新缓冲区"""
        if self._buffer and not self._closed:
            self._write_buffer()
    
    def _write_buffer(self):
        """将缓冲区数据写入网关"""
        url = f"{self.base_url}/file/write"
        params = {
            "path": self.path,
            "offset": self.current_position
        }
        try:
            response = self.http_client.post(url, params=params, data=bytes(self._buffer),
                                             check_status=False)
        except requests.exceptions.RequestException as e:
            raise BackendIOError(errno.EIO, str(e), self.path) from e
        
        code, message = response_errno(response)
        if code != 0:
            logger.error(f"Failed to write {len(self._buffer)} bytes to {self.path}: {message}")
            raise BackendIOError(code, message, self.path)
        
        logger.debug(f"Wrote {len(self._buffer)} bytes to {self.path} at offset {self.current_position}")
        self.current_position += len(self._buffer)
        self._buffer = bytearray()
    
    def tell(self) -> int:
        """获取已写入的总字节数"""
        return self.current_position + len(self._buffer)
    
    def close(self):
        """关闭流，提交剩余数据"""
        if not self._closed:
            self.flush()
            self._closed = True
            logger.info(f"Closed output stream for {self.path}")
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    def get_md5(self) -> str:
        """
        获取已写入数据的MD5值
        
        Returns:
            MD5哈希值
        """
        return self.md5_hash.hexdigest()
