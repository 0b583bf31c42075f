"""
对战竞技场

组织多智能体对战
"""
from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass
from itertools import permutations
import logging
import math

from .evaluator import Agent, play_game
from .metrics import GameMetrics, MetricsCollector

logger = logging.getLogger(__name__)


def games_per_permutation(total_games: int, n_agents: int, players: int) -> int:
    """
    循环赛中每种座位排列的对局数

    把总对局数平均分到所有排列上，至少 1 局
    """
    n_perms = math.perm(n_agents, players)
    if n_perms == 0:
        return 0
    return max(1, total_games // n_perms)


@dataclass
class MatchResult:
    """对局结果"""
    agents: Tuple[str, ...]  # 按座位排列
    winner: Optional[str]
    winner_seat: Optional[int]
    length: int
    bombs: int
    cards_left: Tuple[int, ...]


@dataclass
class TournamentResult:
    """锦标赛结果"""
    standings: Dict[str, Dict[str, float]]
    total_games: int
    matches: List[MatchResult]

    def get_ranking(self) -> List[Tuple[str, float]]:
        """获取排名"""
        return sorted(
            [(name, stats.get("win_rate", 0.0)) for name, stats in self.standings.items()],
            key=lambda x: x[1],
            reverse=True,
        )

    def __repr__(self) -> str:
        ranking = self.get_ranking()
        lines = [f"Tournament Results ({self.total_games} games):"]
        for i, (name, win_rate) in enumerate(ranking):
            lines.append(f"  {i+1}. {name}: {win_rate:.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    组织智能体之间的对战
    """

    def __init__(self, env_fn: Callable):
        self.env_fn = env_fn

    def play_match(
        self,
        agents: List[Agent],
        n_games: int = 1,
        seed: Optional[int] = None,
    ) -> List[MatchResult]:
        """
        进行对局

        Args:
            agents: 按座位排列的智能体 (数量等于人数)
            n_games: 对局数
            seed: 起始种子，第 i 局使用 seed + i

        Returns:
            对局结果列表
        """
        env = self.env_fn()
        names = tuple(agent.name for agent in agents)
        results = []

        for game_idx in range(n_games):
            game_seed = None if seed is None else seed + game_idx
            state, _, length = play_game(env, agents, seed=game_seed)
            metrics = GameMetrics.from_state(state, names, length)

            results.append(MatchResult(
                agents=names,
                winner=metrics.winner_name,
                winner_seat=metrics.winner,
                length=length,
                bombs=metrics.bombs,
                cards_left=metrics.cards_left,
            ))

        return results

    def round_robin(
        self,
        agents: List[Agent],
        games_per_match: int = 10,
        seed: Optional[int] = None,
    ) -> TournamentResult:
        """
        循环赛

        智能体的每种座位排列都对战

        Args:
            agents: 智能体列表 (至少人数个)
            games_per_match: 每种排列的对局数
            seed: 起始种子

        Returns:
            锦标赛结果
        """
        players = self.env_fn().config.players
        if len(agents) < players:
            raise ValueError(f"Need at least {players} agents, got {len(agents)}")

        collector = MetricsCollector()
        all_matches = []

        # 生成所有座位排列
        for match_idx, perm in enumerate(permutations(range(len(agents)), players)):
            match_agents = [agents[i] for i in perm]
            match_seed = None if seed is None else seed + match_idx * games_per_match

            results = self.play_match(match_agents, games_per_match, seed=match_seed)
            all_matches.extend(results)

            for result in results:
                collector.add_game(GameMetrics(
                    players=result.agents,
                    winner=result.winner_seat,
                    length=result.length,
                    bombs=result.bombs,
                    cards_left=result.cards_left,
                ))

            logger.info(f"Match {match_idx + 1}: {', '.join(a.name for a in match_agents)} done")

        standings = {
            agent.name: collector.compute_metrics(agent.name)
            for agent in agents
        }

        return TournamentResult(
            standings=standings,
            total_games=len(all_matches),
            matches=all_matches,
        )
