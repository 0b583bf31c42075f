"""
Evaluation Layer - 评估框架

Modules:
    evaluator: 评估器和智能体
    arena: 对战竞技场
    metrics: 评估指标
"""
from .evaluator import (
    EvalResult,
    Agent,
    RandomAgent,
    SimpleAgent,
    HeuristicAgent,
    Evaluator,
    play_game,
)
from .arena import (
    MatchResult,
    TournamentResult,
    Arena,
    games_per_permutation,
)
from .metrics import (
    GameMetrics,
    MetricsCollector,
    count_bombs,
)

__all__ = [
    # evaluator
    "EvalResult",
    "Agent",
    "RandomAgent",
    "SimpleAgent",
    "HeuristicAgent",
    "Evaluator",
    "play_game",
    # arena
    "MatchResult",
    "TournamentResult",
    "Arena",
    "games_per_permutation",
    # metrics
    "GameMetrics",
    "MetricsCollector",
    "count_bombs",
]
