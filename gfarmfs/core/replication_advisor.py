"""
副本顾问
读取文件前检查配置的目标主机上是否已有副本，没有时随机挑选一台发起副本复制。
整个过程尽力而为，任何失败都只记录日志，不影响读取
"""

import logging
import random
import time
from typing import Callable, List, Optional, Set
from gfarmfs.core.backend import GfarmBackend
from gfarmfs.domain.replication_outcome import ReplicationOutcome
from gfarmfs.exceptions import ReplicationDegradedError
from gfarmfs.util.configuration import (
    Configuration,
    REPLICATION_DESTINATIONS_KEY,
    REPLICATION_WAIT_INTERVAL_KEY,
    REPLICATION_WAIT_KEY,
    REPLICATION_WAIT_TIMEOUT_KEY,
)

logger = logging.getLogger(__name__)

DEFAULT_WAIT_INTERVAL_MS = 50
DEFAULT_WAIT_TIMEOUT_MS = 60000


class ReplicationAdvisor:
    """副本顾问"""
    
    def __init__(self, backend: GfarmBackend, conf: Configuration,
                 rng: Optional[random.Random] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        """
        初始化副本顾问
        
        Args:
            backend: 后端
            conf: 配置，每次检查时重新读取目标主机和等待设置
            rng: 随机数源，默认每次使用 random.SystemRandom
            sleep: 等待确认时的休眠函数
            clock: 等待确认时的时钟
        """
        self.backend = backend
        self.conf = conf
        self._rng = rng
        self._sleep = sleep
        self._clock = clock
    
    def ensure_local_replica(self, path: str) -> ReplicationOutcome:
        """
        确保目标主机之一持有副本
        
        Args:
            path: 规范路径
            
        Returns:
            本次检查的结果，失败时返回DEGRADED而不是抛出异常
        """
        logger.info(f"Checking {path} for replication.")
        destinations = self.conf.get_strings(REPLICATION_DESTINATIONS_KEY)
        if not destinations:
            logger.debug("No replication destinations configured")
            return ReplicationOutcome.SKIPPED
        
        try:
            return self._replicate_if_required(path, destinations)
        except Exception as e:
            logger.warning(f"Replication of {path} degraded: {e}")
            return ReplicationOutcome.DEGRADED
    
    def _replicate_if_required(self, path: str, destinations: List[str]) -> ReplicationOutcome:
        if self._local_replicas(path, destinations):
            logger.info(f"Replication not required for {path}")
            return ReplicationOutcome.NOT_REQUIRED
        
        destination = destinations[self._choose_index(len(destinations))]
        file_size = self.backend.get_file_size(path)
        logger.info(f"Replicating {path} to {destination}")
        
        start = time.perf_counter()
        code = self.backend.replicate_to(path, destination)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if code != 0:
            raise ReplicationDegradedError(
                f"Replication of {path} to {destination} failed: {self.backend.get_error_string(code)}")
        logger.info(f"Replication took {elapsed_ms:f} ms for {file_size / 1024.0:f} Kbytes")
        
        if not self.conf.get_boolean(REPLICATION_WAIT_KEY, False):
            return ReplicationOutcome.REQUESTED
        return self._wait_for_replica(path, destinations)
    
    def _local_replicas(self, path: str, destinations: List[str]) -> Set[str]:
        """当前持有副本的目标主机，位置提示与区间无关，因此按 0, 0 查询"""
        hosts = set(self.backend.get_data_location(path, 0, 0))
        return hosts.intersection(destinations)
    
    def _choose_index(self, count: int) -> int:
        """在目标主机中均匀随机选择一个，安全随机源不可用时退回第一个"""
        try:
            rng = self._rng or random.SystemRandom()
            return rng.randrange(count)
        except NotImplementedError:
            logger.warning("Secure random source unavailable, using first destination")
            return 0
    
    def _wait_for_replica(self, path: str, destinations: List[str]) -> ReplicationOutcome:
        """轮询位置提示直到目标主机出现副本或超时"""
        interval = self.conf.get_int(REPLICATION_WAIT_INTERVAL_KEY, DEFAULT_WAIT_INTERVAL_MS) / 1000.0
        timeout = self.conf.get_int(REPLICATION_WAIT_TIMEOUT_KEY, DEFAULT_WAIT_TIMEOUT_MS) / 1000.0
        deadline = self._clock() + timeout
        
        while True:
            found = self._local_replicas(path, destinations)
            if found:
                logger.info(f"Local replica for {path} found on {sorted(found)[0]}")
                return ReplicationOutcome.CONFIRMED
            if self._clock() >= deadline:
                raise ReplicationDegradedError(
                    f"Timed out after {timeout:.3f}s waiting for replication of {path}")
            logger.debug(f"Waiting for replication of {path}")
            self._sleep(interval)
