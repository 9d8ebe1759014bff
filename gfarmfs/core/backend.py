"""
后端客户端能力抽象基类
定义了适配层依赖的逐节点原语，所有路径参数都是规范路径（以 / 开头、不带scheme）

修改类原语返回int错误码，0表示成功；查询类原语失败时抛出BackendIOError
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, List


class GfarmBackend(ABC):
    """Gfarm后端原语集合"""
    
    @abstractmethod
    def exists(self, path: str) -> bool:
        """路径是否存在"""
    
    @abstractmethod
    def is_file(self, path: str) -> bool:
        """是否为普通文件"""
    
    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """是否为目录"""
    
    @abstractmethod
    def readdir(self, path: str) -> List[str]:
        """
        列出目录下的子节点名称
        
        返回结果包含 . 和 ..
        """
    
    @abstractmethod
    def get_file_size(self, path: str) -> int:
        """文件大小（字节）"""
    
    @abstractmethod
    def get_modification_time(self, path: str) -> int:
        """修改时间（毫秒）"""
    
    @abstractmethod
    def get_owner(self, path: str) -> str:
        """属主"""
    
    @abstractmethod
    def get_group(self, path: str) -> str:
        """属组"""
    
    @abstractmethod
    def get_permission(self, path: str) -> int:
        """权限位"""
    
    @abstractmethod
    def get_replication(self, path: str) -> int:
        """副本数"""
    
    @abstractmethod
    def mkdir(self, path: str, mode: int) -> int:
        """创建单级目录"""
    
    @abstractmethod
    def rmdir(self, path: str) -> int:
        """删除空目录"""
    
    @abstractmethod
    def remove(self, path: str) -> int:
        """删除文件"""
    
    @abstractmethod
    def rename(self, src: str, dst: str) -> int:
        """重命名"""
    
    @abstractmethod
    def set_permission(self, path: str, mode: int) -> int:
        """修改权限位"""
    
    @abstractmethod
    def get_data_location(self, path: str, start: int, length: int) -> List[str]:
        """
        获取持有数据的主机列表
        
        后端把整个文件当作一个区段，start和length不影响结果
        """
    
    @abstractmethod
    def replicate_to(self, path: str, host: str) -> int:
        """把文件副本复制到指定主机，同步返回"""
    
    @abstractmethod
    def open_read(self, path: str) -> BinaryIO:
        """打开文件用于读取"""
    
    @abstractmethod
    def create_write(self, path: str, mode: int) -> BinaryIO:
        """创建文件用于写入"""
    
    @abstractmethod
    def get_error_string(self, code: int) -> str:
        """错误码对应的描述"""
    
    def close(self):
        """释放后端连接"""
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
