"""
HTTP客户端工具类
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Optional, Dict, Any, Tuple
import errno
import logging

logger: logging.Logger = logging.getLogger(__name__)


class HttpClientUtil:
    """HTTP客户端工具类"""
    
    def __init__(self, max_retries: int = 3, timeout: float = 30, 
                 max_connections: int = 100):
        """
        初始化HTTP客户端
        
        Args:
            max_retries: 最大重试次数
            timeout: 请求超时时间（秒），每次请求都会带上
            max_connections: 最大连接数
        """
        self.max_retries = max_retries
        self.timeout = timeout
        self.max_connections = max_connections
        
        # 创建Session并配置重试策略
        self.session: requests.Session = requests.Session()
        
        # 只对幂等请求重试，避免重复执行rename、remove等操作
        retry_strategy: Retry = Retry(
            total=max_retries,
            backoff_factor=0.1,
            status_forcelist=[502, 503, 504],
            allowed_methods=["GET", "HEAD"]
        )
        
        adapter: HTTPAdapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=max_connections,
            pool_maxsize=max_connections
        )
        
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
    
    def get(self, url: str, params: Optional[Dict[str, Any]] = None, 
            headers: Optional[Dict[str, str]] = None, check_status: bool = True,
            **kwargs) -> 'requests.Response':
        """
        发送GET请求
        
        Args:
            url: 请求URL
            params: 查询参数
            headers: 请求头
            check_status: 非2xx响应是否抛出异常
            **kwargs: 其他参数
            
        Returns:
            requests.Response对象
        """
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.get(url, params=params, headers=headers, **kwargs)
            if check_status:
                response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"GET request failed: {url}, error: {e}")
            raise
    
    def post(self, url: str, data: Any = None, 
             json_data: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None, 
             check_status: bool = True, **kwargs) -> 'requests.Response':
        """
        发送POST请求
        
        Args:
            url: 请求URL
            data: 表单数据或原始字节
            json_data: JSON数据
            headers: 请求头
            check_status: 非2xx响应是否抛出异常
            **kwargs: 其他参数
            
        Returns:
            requests.Response对象
        """
        kwargs.setdefault("timeout", self.timeout)
        try:
            response = self.session.post(url, data=data, json=json_data, headers=headers, **kwargs)
            if check_status:
                response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"POST request failed: {url}, error: {e}")
            raise
    
    def close(self):
        """关闭Session"""
        self.session.close()
    
    def __enter__(self):
        """上下文管理器入口"""
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """上下文管理器出口"""
        self.close()


def response_errno(response: 'requests.Response') -> Tuple[int, str]:
    """
    解析网关响应中的错误码
    
    网关以 {"errno": n, "error": "..."} 返回结果，非JSON的失败响应按EIO处理
    
    Returns:
        (错误码, 错误描述)，成功时错误码为0
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and "errno" in body:
        return int(body.get("errno") or 0), body.get("error") or ""
    if response.ok:
        return 0, ""
    return errno.EIO, response.text or f"HTTP {response.status_code}"
