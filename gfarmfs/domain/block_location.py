"""
数据位置提示类
"""

from typing import List, Optional


class BlockLocation:
    """
    数据位置提示

    后端把整个文件当作一个区段，不提供按字节范围的位置信息
    """
    
    def __init__(self, names: Optional[List[str]], hosts: List[str], offset: int, length: int):
        """
        Args:
            names: host:port 形式的名称，后端不提供时为None
            hosts: 持有数据的主机列表
            offset: 起始偏移
            length: 长度
        """
        self.names: List[str] = list(names) if names else []
        self.hosts: List[str] = list(hosts)
        self.offset: int = offset
        self.length: int = length
    
    def get_names(self) -> List[str]:
        return self.names
    
    def get_hosts(self) -> List[str]:
        return self.hosts
    
    def get_offset(self) -> int:
        return self.offset
    
    def get_length(self) -> int:
        return self.length
    
    def __str__(self):
        return f"BlockLocation{{hosts={self.hosts}, offset={self.offset}, length={self.length}}}"
    
    def __repr__(self):
        return self.__str__()
