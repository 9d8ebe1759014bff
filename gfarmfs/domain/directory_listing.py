"""
目录列表类
"""

from typing import Iterator, List, Optional
from .file_status import FileStatus


class DirectoryListing:
    """
    目录下直接子节点的状态列表

    不包含 . 和 ..。底层列目录调用失败时为"列表不可用"，与空目录区分开
    """
    
    def __init__(self, entries: Optional[List[FileStatus]] = None, available: bool = True,
                 error: Optional[str] = None):
        self.entries: List[FileStatus] = entries or []
        self.available: bool = available
        self.error: Optional[str] = error
    
    @classmethod
    def unavailable(cls, error: Optional[str] = None) -> 'DirectoryListing':
        """构造"列表不可用"结果"""
        return cls(entries=[], available=False, error=error)
    
    def is_available(self) -> bool:
        return self.available
    
    def get_entries(self) -> List[FileStatus]:
        return self.entries
    
    def __iter__(self) -> Iterator[FileStatus]:
        return iter(self.entries)
    
    def __len__(self):
        return len(self.entries)
    
    def __getitem__(self, index):
        return self.entries[index]
    
    def __str__(self):
        if not self.available:
            return f"DirectoryListing{{unavailable, error='{self.error}'}}"
        return f"DirectoryListing{{entries={self.entries}}}"
    
    def __repr__(self):
        return self.__str__()
