#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --agent heuristic --opponent simple --games 100
    python scripts/evaluate.py --compare --agent1 heuristic --agent2 random
    python scripts/evaluate.py --tournament --agents heuristic simple random --players 3
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import GameConfig, InvalidConfiguration
from env import TienLenEnv
from evaluation import (
    Agent,
    Evaluator,
    RandomAgent,
    SimpleAgent,
    HeuristicAgent,
    Arena,
    games_per_permutation,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

AGENT_TYPES = ["heuristic", "simple", "random"]


def parse_args():
    parser = argparse.ArgumentParser(description="Tien Len Evaluation")

    # 模式
    parser.add_argument("--compare", action="store_true", help="Compare two agents")
    parser.add_argument("--tournament", action="store_true", help="Run tournament")

    # 智能体
    parser.add_argument("--agent", type=str, default="heuristic", choices=AGENT_TYPES, help="Agent to evaluate")
    parser.add_argument("--agent1", type=str, choices=AGENT_TYPES, help="First agent for comparison")
    parser.add_argument("--agent2", type=str, choices=AGENT_TYPES, help="Second agent for comparison")
    parser.add_argument("--agents", nargs="+", type=str, choices=AGENT_TYPES, help="Agents for tournament")
    parser.add_argument(
        "--opponent",
        type=str,
        default="simple",
        choices=AGENT_TYPES,
        help="Opponent type",
    )

    # 评估参数
    parser.add_argument("--games", type=int, default=100, help="Number of games (split across seat permutations in a tournament)")
    parser.add_argument("--players", type=int, help="Number of players (2-4)")
    parser.add_argument("--config", type=str, help="Game config JSON file")
    parser.add_argument("--seed", type=int, help="Random seed")

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def build_agent(kind: str, name: str, seed=None) -> Agent:
    """按类型创建智能体"""
    if kind == "random":
        return RandomAgent(name, seed=seed)
    if kind == "simple":
        return SimpleAgent(name)
    return HeuristicAgent(name)


def load_config(args) -> GameConfig:
    config = GameConfig.from_json(args.config) if args.config else GameConfig()
    if args.players is not None:
        config.players = args.players
    if args.seed is not None:
        config.seed = args.seed
    return config.validate()


def save_results(path: str, results: dict):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=2, ensure_ascii=False)
    logger.info(f"Results saved to {path}")


def evaluate_single(args, config: GameConfig):
    """评估单个智能体"""
    logger.info(f"Evaluating agent: {args.agent} vs {args.opponent} ({config.players} players)")

    agent = build_agent(args.agent, args.agent, seed=args.seed)
    opponents = [
        build_agent(args.opponent, f"{args.opponent}{i}", seed=None if args.seed is None else args.seed + i + 1)
        for i in range(config.players - 1)
    ]

    evaluator = Evaluator(env_fn=lambda: TienLenEnv(config=config))
    result = evaluator.evaluate(
        agent=agent,
        n_games=args.games,
        opponents=opponents,
        seed=args.seed,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Average Reward: {result.avg_reward:.2f}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Average Cards Left: {result.avg_cards_left:.2f}")
    logger.info(f"Bomb Rate: {result.bomb_rate:.2f}")
    logger.info("=" * 50)

    if args.output:
        save_results(args.output, {
            "agent": args.agent,
            "opponent": args.opponent,
            "players": config.players,
            "win_rate": result.win_rate,
            "avg_reward": result.avg_reward,
            "avg_length": result.avg_length,
            "avg_cards_left": result.avg_cards_left,
            "bomb_rate": result.bomb_rate,
            "games_played": result.games_played,
        })

    return result


def compare_agents(args, config: GameConfig):
    """比较两个智能体"""
    logger.info(f"Comparing agents: {args.agent1} vs {args.agent2}")

    agent1 = build_agent(args.agent1, f"{args.agent1}_1", seed=args.seed)
    agent2 = build_agent(args.agent2, f"{args.agent2}_2", seed=None if args.seed is None else args.seed + 1)

    evaluator = Evaluator(env_fn=lambda: TienLenEnv(config=config))
    result = evaluator.compare(agent1, agent2, n_games=args.games, seed=args.seed)

    logger.info("=" * 50)
    logger.info("Comparison Results")
    logger.info("=" * 50)
    logger.info(f"Agent 1 ({agent1.name}) wins: {result['agent1_wins']} ({result['agent1_win_rate']:.2%})")
    logger.info(f"Agent 2 ({agent2.name}) wins: {result['agent2_wins']} ({result['agent2_win_rate']:.2%})")
    logger.info("=" * 50)

    if args.output:
        save_results(args.output, result)

    return result


def run_tournament(args, config: GameConfig):
    """运行锦标赛"""
    kinds = list(args.agents)
    # 人数不足时用随机智能体补齐
    while len(kinds) < config.players:
        kinds.append("random")

    agents = [
        build_agent(kind, f"{kind}_{i}", seed=None if args.seed is None else args.seed + i)
        for i, kind in enumerate(kinds)
    ]
    logger.info(f"Running tournament with {len(agents)} agents")

    arena = Arena(env_fn=lambda: TienLenEnv(config=config))
    result = arena.round_robin(agents, games_per_match=games_per_permutation(args.games, len(agents), config.players), seed=args.seed)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)

    ranking = result.get_ranking()
    for i, (name, win_rate) in enumerate(ranking):
        logger.info(f"{i+1}. {name}: {win_rate:.2%}")

    logger.info("=" * 50)

    if args.output:
        save_results(args.output, {
            "rankings": ranking,
            "total_games": result.total_games,
            "standings": result.standings,
        })

    return result


def main():
    args = parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args)
    except InvalidConfiguration as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    if args.tournament and args.agents:
        run_tournament(args, config)
    elif args.compare and args.agent1 and args.agent2:
        compare_agents(args, config)
    elif not args.compare and not args.tournament:
        evaluate_single(args, config)
    else:
        logger.error("Please specify --compare with --agent1/--agent2, or --tournament with --agents")
        sys.exit(1)


if __name__ == "__main__":
    main()
