"""
Environment Layer - Gymnasium 兼容环境

Modules:
    tienlen_env: 主环境类
    observation: 观测空间构建
    reward: 奖励函数
"""
from .tienlen_env import (
    TienLenEnv,
    make_env,
    MAX_ACTIONS,
    PASS_ACTION,
)

from .observation import (
    Observation,
    ObservationBuilder,
)

from .reward import (
    RewardType,
    RewardConfig,
    RewardCalculator,
)

__all__ = [
    # env
    "TienLenEnv",
    "make_env",
    "MAX_ACTIONS",
    "PASS_ACTION",
    # observation
    "Observation",
    "ObservationBuilder",
    # reward
    "RewardType",
    "RewardConfig",
    "RewardCalculator",
]
