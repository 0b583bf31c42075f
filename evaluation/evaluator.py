"""
评估器

智能体定义与单智能体评估
"""
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
import logging

import numpy as np

from core.cards import Card
from core.heuristic import MoveHeuristic, choose_move_simple
from core.state import TableState

from .metrics import GameMetrics, MetricsCollector

logger = logging.getLogger(__name__)

# 单局最大步数 (防止智能体反复出非法牌导致死循环)
MAX_GAME_STEPS = 1000


@dataclass
class EvalResult:
    """评估结果"""
    win_rate: float
    avg_length: float
    games_played: int
    avg_reward: float = 0.0
    avg_cards_left: float = 0.0
    bomb_rate: float = 0.0
    extra_stats: Dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"EvalResult(win_rate={self.win_rate:.2%}, "
            f"avg_cards_left={self.avg_cards_left:.2f}, "
            f"games={self.games_played})"
        )


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
        """选择要出的牌，None 表示过牌"""
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class RandomAgent(Agent):
    """随机智能体: 在合法出牌 (跟牌时含过牌) 中均匀选择"""

    def __init__(self, name: str = "random", seed: Optional[int] = None):
        super().__init__(name)
        self._rng = np.random.default_rng(seed)
        self._heuristic = MoveHeuristic()

    def act(self, state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
        moves: List[Optional[Tuple[Card, ...]]] = [
            combo.cards for combo in self._heuristic.legal_moves(state, seat)
        ]
        if state.last_combo is not None:
            moves.insert(0, None)
        if not moves:
            return None
        idx = int(self._rng.integers(len(moves)))
        return moves[idx]


class SimpleAgent(Agent):
    """简单智能体: 出最小的合法单张，否则过牌"""

    def __init__(self, name: str = "simple"):
        super().__init__(name)

    def act(self, state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
        return choose_move_simple(state, seat)


class HeuristicAgent(Agent):
    """启发式智能体"""

    def __init__(self, name: str = "heuristic", heuristic: Optional[MoveHeuristic] = None):
        super().__init__(name)
        self.heuristic = heuristic or MoveHeuristic()

    def act(self, state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
        return self.heuristic.choose(state, seat)


def play_game(
    env,
    agents: Sequence[Agent],
    seed: Optional[int] = None,
    max_steps: int = MAX_GAME_STEPS,
) -> Tuple[TableState, Dict[int, float], int]:
    """
    在环境中进行一局

    Args:
        env: TienLenEnv 实例
        agents: 按座位排列的智能体
        seed: 本局种子
        max_steps: 最大步数

    Returns:
        (终局状态, 各座位累计奖励, 步数)
    """
    if len(agents) != env.config.players:
        raise ValueError(
            f"Need exactly {env.config.players} agents, got {len(agents)}"
        )

    for agent in agents:
        agent.reset()

    obs, info = env.reset(seed=seed)
    rewards = {seat: 0.0 for seat in range(len(agents))}
    done = False
    length = 0

    while not done and length < max_steps:
        seat = info["current_player"]
        action = agents[seat].act(env.state, seat)
        obs, reward, terminated, truncated, info = env.step(action)

        if "error" in info:
            # 非法出牌按过牌处理
            logger.warning(f"{agents[seat].name} made an illegal move ({info['error']}), passing instead")
            rewards[seat] += reward
            obs, reward, terminated, truncated, info = env.step(None)

        rewards[seat] += reward
        done = terminated or truncated
        length += 1

    if not done:
        logger.warning(f"Game truncated after {max_steps} steps")

    return env.state, rewards, length


class Evaluator:
    """
    评估器

    评估智能体在环境中的表现 (轮流坐每个座位)
    """

    def __init__(self, env_fn: Callable):
        self.env_fn = env_fn

    def evaluate(
        self,
        agent: Agent,
        n_games: int = 100,
        opponents: Optional[List[Agent]] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
    ) -> EvalResult:
        """
        评估智能体

        Args:
            agent: 待评估智能体
            n_games: 游戏数量
            opponents: 对手列表 (人数 - 1 个)
            seed: 起始种子，第 i 局使用 seed + i
            verbose: 是否输出详情

        Returns:
            评估结果
        """
        env = self.env_fn()
        players = env.config.players

        if opponents is None:
            opponents = [SimpleAgent(f"simple{i}") for i in range(players - 1)]
        if len(opponents) != players - 1:
            raise ValueError(f"Need {players - 1} opponents, got {len(opponents)}")

        collector = MetricsCollector()
        wins = 0
        total_reward = 0.0

        for game_idx in range(n_games):
            # 确定智能体位置 (轮流)
            agent_seat = game_idx % players
            seated = list(opponents)
            seated.insert(agent_seat, agent)

            game_seed = None if seed is None else seed + game_idx
            state, rewards, length = play_game(env, seated, seed=game_seed)

            collector.add_game(GameMetrics.from_state(state, [a.name for a in seated], length))
            if state.winner == agent_seat:
                wins += 1
            total_reward += rewards[agent_seat]

            if verbose and (game_idx + 1) % 10 == 0:
                logger.info(f"Game {game_idx + 1}/{n_games}, Win rate: {wins/(game_idx+1):.2%}")

        metrics = collector.compute_metrics(agent.name)
        overall = collector.compute_metrics()

        return EvalResult(
            win_rate=wins / n_games if n_games > 0 else 0.0,
            avg_length=overall.get("avg_length", 0.0),
            games_played=n_games,
            avg_reward=total_reward / n_games if n_games > 0 else 0.0,
            avg_cards_left=metrics.get("avg_cards_left", 0.0),
            bomb_rate=overall.get("avg_bombs", 0.0),
            extra_stats={
                "wins": float(wins),
                "finished_rate": overall.get("finished_rate", 0.0),
            },
        )

    def compare(
        self,
        agent1: Agent,
        agent2: Agent,
        n_games: int = 100,
        seed: Optional[int] = None,
    ) -> Dict[str, float]:
        """
        对比两个智能体

        两者交替入座 (agent1, agent2, agent1, ...)，每局轮换起始座位

        Returns:
            对比结果
        """
        env = self.env_fn()
        players = env.config.players

        agent1_wins = 0
        agent2_wins = 0

        for game_idx in range(n_games):
            pair = (agent1, agent2) if game_idx % 2 == 0 else (agent2, agent1)
            seated = [pair[seat % 2] for seat in range(players)]

            game_seed = None if seed is None else seed + game_idx
            state, _, _ = play_game(env, seated, seed=game_seed)

            if state.winner is None:
                continue
            if seated[state.winner] is agent1:
                agent1_wins += 1
            else:
                agent2_wins += 1

        return {
            "agent1_wins": agent1_wins,
            "agent2_wins": agent2_wins,
            "agent1_win_rate": agent1_wins / n_games if n_games > 0 else 0.0,
            "agent2_win_rate": agent2_wins / n_games if n_games > 0 else 0.0,
        }
