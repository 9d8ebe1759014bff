"""
ZooKeeper工具类
通过ZooKeeper发现可用的Gfarm HTTP网关
"""

import logging
from typing import List, Optional, Callable
from kazoo.client import KazooClient
from kazoo.exceptions import NoNodeError
from gfarmfs.domain.gateway_msg import GatewayMsg
from gfarmfs.util.configuration import DEFAULT_ZOOKEEPER_PATH

logger = logging.getLogger(__name__)


class ZkUtil:
    """ZooKeeper工具类"""
    
    def __init__(self, hosts: str = "localhost:2181", timeout: float = 30,
                 gateway_path: str = DEFAULT_ZOOKEEPER_PATH):
        """
        初始化ZooKeeper工具
        
        Args:
            hosts: ZooKeeper服务器地址
            timeout: 连接超时时间（秒）
            gateway_path: 网关注册节点的父路径，子节点数据为 host:port
        """
        self.hosts = hosts
        self.timeout = timeout
        self.gateway_path = gateway_path
        self.zk: Optional[KazooClient] = None
        self.gateways: List[GatewayMsg] = []
        self.gateway_change_callbacks: List[Callable] = []
    
    def connect(self):
        """连接ZooKeeper"""
        try:
            self.zk = KazooClient(hosts=self.hosts, timeout=self.timeout)
            self.zk.start(timeout=self.timeout)
            logger.info(f"Connected to ZooKeeper: {self.hosts}")
            
            # 设置监听器
            self._setup_watchers()
            
        except Exception as e:
            logger.error(f"Failed to connect to ZooKeeper: {e}")
            raise
    
    def disconnect(self):
        """断开ZooKeeper连接"""
        if self.zk:
            self.zk.stop()
            self.zk.close()
            self.zk = None
            logger.info("Disconnected from ZooKeeper")
    
    def _setup_watchers(self):
        """监听网关节点变化"""
        if not self.zk:
            return
        
        try:
            self.zk.ensure_path(self.gateway_path)
            self.zk.ChildrenWatch(self.gateway_path, self._on_gateways_changed)
        except Exception as e:
            logger.warning(f"Failed to setup gateway watcher: {e}")
    
    def _on_gateways_changed(self, children):
        """网关节点变化回调"""
        logger.info(f"Gateway nodes changed: {children}")
        self._update_gateways()
        self._notify_gateways_changed()
    
    def _update_gateways(self):
        """更新网关列表"""
        if not self.zk:
            return
        
        try:
            children = sorted(self.zk.get_children(self.gateway_path))
        except NoNodeError:
            logger.warning(f"Gateway path does not exist: {self.gateway_path}")
            self.gateways = []
            return
        
        gateways = []
        for child in children:
            try:
                data, _ = self.zk.get(f"{self.gateway_path}/{child}")
                if data:
                    gateways.append(GatewayMsg.parse(data.decode('utf-8')))
            except (NoNodeError, ValueError) as e:
                logger.warning(f"Failed to parse gateway data for {child}: {e}")
        self.gateways = gateways
    
    def get_gateways(self) -> List[GatewayMsg]:
        """获取网关列表"""
        if not self.gateways:
            self._update_gateways()
        return self.gateways.copy()
    
    def get_gateway(self) -> Optional[GatewayMsg]:
        """获取当前使用的网关，按节点名排序取第一个"""
        gateways = self.get_gateways()
        if gateways:
            return gateways[0]
        return None
    
    def register_gateway_change_callback(self, callback: Callable):
        """注册网关变化回调"""
        self.gateway_change_callbacks.append(callback)
    
    def _notify_gateways_changed(self):
        """通知网关变化"""
        for callback in self.gateway_change_callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Gateway change callback failed: {e}")
    
    def __enter__(self):
        self.connect()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
