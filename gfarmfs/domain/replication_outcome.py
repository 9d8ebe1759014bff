"""
副本迁移结果枚举
"""

from enum import Enum


class ReplicationOutcome(Enum):
    """一次副本检查的结果"""
    SKIPPED = "skipped"            # 未配置目标主机
    NOT_REQUIRED = "not_required"  # 目标主机上已有副本
    REQUESTED = "requested"        # 已发出迁移请求，未等待确认
    CONFIRMED = "confirmed"        # 已确认副本出现在目标主机上
    DEGRADED = "degraded"          # 迁移失败或等待超时，读取照常进行
    
    def __str__(self):
        return self.value
