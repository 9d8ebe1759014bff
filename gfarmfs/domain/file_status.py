"""
文件状态信息类
"""

from .file_type import FileType
from .fs_path import FsPath
from .fs_permission import FsPermission


class FileStatus:
    """
    文件状态快照

    每次都从后端实时查询构造，不做缓存
    """
    
    def __init__(self, length: int, is_dir: bool, block_replication: int, block_size: int,
                 modification_time: int, access_time: int, permission: FsPermission,
                 owner: str, group: str, path: FsPath):
        """
        初始化文件状态
        
        Args:
            length: 文件大小，目录为0
            is_dir: 是否为目录
            block_replication: 副本数
            block_size: 块大小，目录为0
            modification_time: 修改时间
            access_time: 访问时间，后端不提供时为0
            permission: 权限位
            owner: 属主
            group: 属组
            path: 完全限定的逻辑路径
        """
        self.length: int = length
        self.is_dir: bool = is_dir
        self.block_replication: int = block_replication
        self.block_size: int = block_size
        self.modification_time: int = modification_time
        self.access_time: int = access_time
        self.permission: FsPermission = permission
        self.owner: str = owner
        self.group: str = group
        self.path: FsPath = path
    
    def get_len(self) -> int:
        """获取文件大小"""
        return self.length
    
    def is_directory(self) -> bool:
        """判断是否为目录"""
        return self.is_dir
    
    def is_file(self) -> bool:
        """判断是否为文件"""
        return not self.is_dir
    
    def get_type(self) -> FileType:
        return FileType.DIRECTORY if self.is_dir else FileType.FILE
    
    def get_replication(self) -> int:
        return self.block_replication
    
    def get_block_size(self) -> int:
        return self.block_size
    
    def get_modification_time(self) -> int:
        return self.modification_time
    
    def get_access_time(self) -> int:
        return self.access_time
    
    def get_permission(self) -> FsPermission:
        return self.permission
    
    def get_owner(self) -> str:
        return self.owner
    
    def get_group(self) -> str:
        return self.group
    
    def get_path(self) -> FsPath:
        """获取完全限定的逻辑路径"""
        return self.path
    
    def __str__(self):
        return (f"FileStatus{{path='{self.path}', length={self.length}, is_dir={self.is_dir}, "
                f"replication={self.block_replication}, block_size={self.block_size}, "
                f"mtime={self.modification_time}, permission={self.permission}, "
                f"owner='{self.owner}', group='{self.group}'}}")
    
    def __repr__(self):
        return self.__str__()
