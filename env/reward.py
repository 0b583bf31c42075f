"""
奖励函数

支持:
- 终局奖励 (sparse)
- 过程奖励 (shaped): 额外奖励出牌数量，惩罚剩余手牌
"""
from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum

from core.state import TableState


class RewardType(Enum):
    """奖励类型"""
    SPARSE = "sparse"  # 仅终局奖励
    SHAPED = "shaped"  # 过程奖励


@dataclass
class RewardConfig:
    """奖励配置"""
    reward_type: RewardType = RewardType.SPARSE
    win_reward: float = 1.0
    lose_reward: float = -1.0
    illegal_penalty: float = -1.0  # 非法动作
    card_bonus: float = 0.01       # 每出一张牌
    card_penalty: float = 0.0      # 终局时每张剩余牌


class RewardCalculator:
    """
    奖励计算器

    根据配置计算某一座位的奖励
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def compute(
        self,
        state: TableState,
        prev_state: Optional[TableState] = None,
        seat: Optional[int] = None,
    ) -> float:
        """
        计算奖励

        Args:
            state: 当前状态
            prev_state: 前一状态 (用于 shaped 奖励)
            seat: 计算奖励的座位

        Returns:
            奖励值
        """
        if seat is None:
            seat = state.current_player

        if self.config.reward_type == RewardType.SPARSE:
            return self._sparse_reward(state, seat)
        return self._shaped_reward(state, prev_state, seat)

    def _sparse_reward(self, state: TableState, seat: int) -> float:
        """
        稀疏奖励：仅在游戏结束时给予

        Returns:
            胜利: win_reward, 失败: lose_reward 减去剩余牌惩罚, 其他: 0
        """
        if not state.finished:
            return 0.0

        if state.winner == seat:
            return self.config.win_reward
        remaining = len(state.get_hand(seat))
        return self.config.lose_reward - remaining * self.config.card_penalty

    def _shaped_reward(
        self,
        state: TableState,
        prev_state: Optional[TableState],
        seat: int,
    ) -> float:
        """过程奖励：终局奖励 + 出牌数量"""
        reward = self._sparse_reward(state, seat)

        if prev_state is not None:
            cards_played = len(prev_state.get_hand(seat)) - len(state.get_hand(seat))
            if cards_played > 0:
                reward += cards_played * self.config.card_bonus

        return reward

    def compute_all(
        self,
        state: TableState,
        prev_state: Optional[TableState] = None,
    ) -> Dict[int, float]:
        """计算所有座位的奖励"""
        return {
            seat: self.compute(state, prev_state, seat)
            for seat in range(state.players)
        }
