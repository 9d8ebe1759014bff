"""
文件输入流类
通过网关按区间读取文件数据
"""

import errno
import hashlib
import logging
import requests
from typing import Optional
from gfarmfs.exceptions import BackendIOError
from gfarmfs.util.http_client_util import HttpClientUtil, response_errno

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024


class FSInputStream:
    """
    文件输入流类，绑定到一个规范路径
    
    文件长度在打开时确定，之后其他写入者追加的数据对本流不可见，
    需要读取新数据时重新打开
    """
    
    def __init__(self, path: str, base_url: str, file_size: int,
                 http_client: Optional[HttpClientUtil] = None,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        初始化文件输入流
        
        Args:
            path: 规范路径
            base_url: 网关地址
            file_size: 打开时的文件大小
            http_client: HTTP客户端
            chunk_size: 单次请求读取的最大字节数
        """
        self.path = path
        self.base_url = base_url
        self.file_size = file_size
        self.http_client = http_client or HttpClientUtil()
        self.chunk_size = chunk_size
        self.current_position = 0
        self.bytes_read = 0
        self._closed = False
    
    def read(self, size: int = -1) -> bytes:
        """
        读取文件数据
        
        Args:
            size: 读取大小，-1表示读取到文件末尾
            
        Returns:
            读取的数据，到达文件末尾时返回空字节串
        """
        if self._closed:
            raise ValueError("Stream is closed")
        if size == 0:
            return b""
        
        available = max(self.file_size - self.current_position, 0)
        remaining = available if size < 0 else min(size, available)
        
        chunks = []
        while remaining > 0:
            chunk = self._read_chunk(min(remaining, self.chunk_size))
            if not chunk:
                break
            chunks.append(chunk)
            self.current_position += len(chunk)
            self.bytes_read += len(chunk)
            remaining -= len(chunk)
        
        return b"".join(chunks)
    
    def _read_chunk(self, size: int) -> bytes:
        """
        从网关读取一个数据块
        
        Args:
            size: 读取大小
            
        Returns:
            读取的数据块
        """
        url = f"{self.base_url}/file/read"
        params = {
            "path": self.path,
            "offset": self.current_position,
            "size": size
        }
        try:
            response = self.http_client.get(url, params=params, check_status=False)
        except requests.exceptions.RequestException as e:
            raise BackendIOError(errno.EIO, str(e), self.path) from e
        
        if not response.ok:
            code, message = response_errno(response)
            raise BackendIOError(code, message, self.path)
        return response.content
    
    def seek(self, offset: int, whence: int = 0) -> int:
        """
        设置读取位置
        
        Args:
            offset: 偏移量
            whence: 参考位置 (0: 文件开头, 1: 当前位置, 2: 文件结尾)
        """
        if whence == 0:
            new_position = offset
        elif whence == 1:
            new_position = self.current_position + offset
        elif whence == 2:
            new_position = self.file_size + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")
        
        self.current_position = min(max(new_position, 0), self.file_size)
        return self.current_position
    
    def tell(self) -> int:
        """获取当前读取位置"""
        return self.current_position
    
    def close(self):
        """关闭流"""
        if not self._closed:
            self._closed = True
            logger.debug(f"Closed input stream for {self.path}, {self.bytes_read} bytes read")
    
    @property
    def closed(self) -> bool:
        return self._closed
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
    
    def calculate_md5(self) -> str:
        """
        计算文件的MD5值，不改变当前读取位置
        
        Returns:
            MD5哈希值
        """
        md5_hash = hashlib.md5()
        original_position = self.current_position
        
        try:
            self.seek(0)
            for chunk in self:
                md5_hash.update(chunk)
        finally:
            self.seek(original_position)
        
        return md5_hash.hexdigest()
    
    def __iter__(self):
        """按8KB分块迭代"""
        return self
    
    def __next__(self):
        chunk = self.read(8192)
        if not chunk:
            raise StopIteration
        return chunk
