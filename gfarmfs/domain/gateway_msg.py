"""
网关消息类
"""


class GatewayMsg:
    """Gfarm HTTP网关地址"""
    
    def __init__(self, host: str = "", port: int = 0):
        """
        初始化网关消息
        
        Args:
            host: 主机地址
            port: 端口号
        """
        self.host: str = host
        self.port: int = port
    
    @classmethod
    def parse(cls, host_port: str) -> 'GatewayMsg':
        """
        解析 host:port 字符串
        
        Raises:
            ValueError: 格式不正确
        """
        host, sep, port_str = host_port.strip().rpartition(':')
        if not sep or not host:
            raise ValueError(f"Invalid gateway address: {host_port}")
        return cls(host=host, port=int(port_str))
    
    def get_host(self) -> str:
        """获取主机地址"""
        return self.host
    
    def get_port(self) -> int:
        """获取端口号"""
        return self.port
    
    def get_url(self) -> str:
        """获取完整URL"""
        return f"http://{self.host}:{self.port}"
    
    def __str__(self):
        return f"GatewayMsg{{host='{self.host}', port={self.port}}}"
    
    def __repr__(self):
        return self.__str__()
