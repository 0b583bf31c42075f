"""
观察空间编码

将牌桌状态转换为 numpy 特征表示 (某一座位的视角，不含他人手牌)
"""
from dataclasses import dataclass
from typing import Dict, Optional
import numpy as np

from core.cards import NUM_CARDS, cards_to_array
from core.config import MAX_PLAYERS
from core.state import TableState


# 单人最多手牌数 (2 人局每人 26 张)
MAX_HAND_SIZE = NUM_CARDS // 2


@dataclass
class Observation:
    """
    结构化观测

    Attributes:
        hand: 自己的手牌 (52,)
        last_combo: 桌面上需要压过的牌 (52,)
        played_cards: 所有已出的牌 (52,)
        cards_left: 各座位剩余牌数 (归一化) (MAX_PLAYERS,)
        position: 相对当前行动者的座位 one-hot (MAX_PLAYERS,)
        passes: 连续过牌数 (1,)
    """
    hand: np.ndarray
    last_combo: np.ndarray
    played_cards: np.ndarray
    cards_left: np.ndarray
    position: np.ndarray
    passes: np.ndarray

    def to_dict(self) -> Dict[str, np.ndarray]:
        """转换为字典格式"""
        return {
            "hand": self.hand,
            "last_combo": self.last_combo,
            "played_cards": self.played_cards,
            "cards_left": self.cards_left,
            "position": self.position,
            "passes": self.passes,
        }

    def to_flat_array(self) -> np.ndarray:
        """展平为单一向量"""
        return np.concatenate([
            self.hand,
            self.last_combo,
            self.played_cards,
            self.cards_left,
            self.position,
            self.passes,
        ])


class ObservationBuilder:
    """
    观测构建器

    负责将 TableState 转换为 Observation
    """

    def build(self, state: TableState, perspective: Optional[int] = None) -> Observation:
        """
        从牌桌状态构建观测

        Args:
            state: 牌桌状态
            perspective: 视角座位 (默认为当前玩家)

        Returns:
            Observation 对象
        """
        if perspective is None:
            perspective = state.current_player

        hand = cards_to_array(state.get_hand(perspective))

        if state.last_combo is None:
            last_combo = np.zeros(NUM_CARDS, dtype=np.float32)
        else:
            last_combo = cards_to_array(state.last_combo.cards)

        played = [card for _, cards in state.play_history for card in cards]
        played_cards = cards_to_array(played)

        # 从视角座位开始的相对顺序
        cards_left = np.zeros(MAX_PLAYERS, dtype=np.float32)
        for offset in range(state.players):
            seat = (perspective + offset) % state.players
            cards_left[offset] = len(state.get_hand(seat)) / MAX_HAND_SIZE

        position = np.zeros(MAX_PLAYERS, dtype=np.float32)
        position[(state.current_player - perspective) % state.players] = 1

        passes = np.array([state.passes_in_row], dtype=np.float32)

        return Observation(
            hand=hand,
            last_combo=last_combo,
            played_cards=played_cards,
            cards_left=cards_left,
            position=position,
            passes=passes,
        )
