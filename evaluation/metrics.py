"""
评估指标

收集对局结果并计算胜率、剩余牌数等指标
"""
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from collections import defaultdict
import numpy as np

from core.combos import ComboType
from core.rules import RuleEngine
from core.state import TableState


def count_bombs(state: TableState) -> int:
    """统计一局中打出的炸弹数"""
    bombs = 0
    for _, cards in state.play_history:
        if not cards:
            continue
        combo = RuleEngine.detect_combo(cards)
        if combo is not None and combo.combo_type == ComboType.BOMB:
            bombs += 1
    return bombs


@dataclass
class GameMetrics:
    """
    单局游戏指标

    Attributes:
        players: 按座位排列的智能体名称
        winner: 赢家座位 (截断时为 None)
        length: 步数
        bombs: 炸弹数
        cards_left: 各座位剩余牌数
    """
    players: Tuple[str, ...]
    winner: Optional[int]
    length: int
    bombs: int
    cards_left: Tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_state(cls, state: TableState, players: Sequence[str], length: int) -> 'GameMetrics':
        """从终局状态提取指标"""
        return cls(
            players=tuple(players),
            winner=state.winner,
            length=length,
            bombs=count_bombs(state),
            cards_left=tuple(len(hand) for hand in state.hands),
        )

    @property
    def winner_name(self) -> Optional[str]:
        if self.winner is None:
            return None
        return self.players[self.winner]


class MetricsCollector:
    """
    指标收集器

    收集和计算游戏指标
    """

    def __init__(self):
        self.games: List[GameMetrics] = []
        self._stats: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))

    def add_game(self, metrics: GameMetrics):
        """添加游戏指标"""
        self.games.append(metrics)

        for seat, name in enumerate(metrics.players):
            stats = self._stats[name]
            stats["games"].append(1)
            stats["wins"].append(1 if metrics.winner == seat else 0)
            stats["lengths"].append(metrics.length)
            if seat < len(metrics.cards_left):
                stats["cards_left"].append(metrics.cards_left[seat])

    def compute_metrics(self, player: Optional[str] = None) -> Dict[str, float]:
        """
        计算指标

        Args:
            player: 指定智能体名称，None 表示全局

        Returns:
            指标字典
        """
        if player is not None:
            stats = self._stats.get(player)
            if not stats or not stats["games"]:
                return {}
            n_games = len(stats["games"])

            return {
                "games": n_games,
                "wins": int(sum(stats["wins"])),
                "win_rate": sum(stats["wins"]) / n_games,
                "avg_length": float(np.mean(stats["lengths"])),
                "avg_cards_left": float(np.mean(stats["cards_left"])) if stats["cards_left"] else 0.0,
            }

        # 全局统计
        n_games = len(self.games)
        if n_games == 0:
            return {}

        return {
            "total_games": n_games,
            "finished_rate": float(np.mean([1 if g.winner is not None else 0 for g in self.games])),
            "avg_length": float(np.mean([g.length for g in self.games])),
            "avg_bombs": float(np.mean([g.bombs for g in self.games])),
        }

    @property
    def players(self) -> List[str]:
        return list(self._stats.keys())

    def reset(self):
        """重置"""
        self.games.clear()
        self._stats.clear()
