#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch               # 观看 AI 对战
    python scripts/play.py --mode play                # 与 AI 对战 (你坐 0 号位)
    python scripts/play.py --mode watch --players 3 --seed 7 --delay 0
"""
import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import (
    GameConfig,
    InvalidConfiguration,
    TableState,
    cards_to_str,
    choose_move,
    str_to_cards,
)
from env import TienLenEnv
from evaluation import Agent, HeuristicAgent, RandomAgent, SimpleAgent

logger = logging.getLogger(__name__)

# 人类玩家座位
HUMAN_SEAT = 0


def parse_args():
    parser = argparse.ArgumentParser(description="Tien Len Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument(
        "--opponent",
        type=str,
        default="heuristic",
        choices=["heuristic", "simple", "random"],
        help="Opponent type",
    )
    parser.add_argument("--config", type=str, help="Game config JSON file")
    parser.add_argument("--players", type=int, help="Number of players (2-4)")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--delay", type=float, default=1.0, help="Delay between AI moves")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def load_config(args) -> GameConfig:
    """读取配置，命令行参数优先"""
    config = GameConfig.from_json(args.config) if args.config else GameConfig()
    if args.players is not None:
        config.players = args.players
    if args.seed is not None:
        config.seed = args.seed
    return config.validate()


def create_agents(args, n: int) -> List[Agent]:
    """创建 AI 智能体"""
    agents = []
    for i in range(n):
        if args.opponent == "simple":
            agent = SimpleAgent(f"Simple_{i}")
        elif args.opponent == "random":
            agent = RandomAgent(f"Random_{i}", seed=None if args.seed is None else args.seed + i)
        else:
            agent = HeuristicAgent(f"AI_{i}")
        agents.append(agent)
    return agents


def watch_game(args, config: GameConfig):
    """观看 AI 对战"""
    env = TienLenEnv(render_mode="human", config=config)
    agents = create_agents(args, config.players)

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        obs, info = env.reset()
        done = False
        step = 0

        while not done:
            seat = info["current_player"]
            agent = agents[seat]
            cards = agent.act(env.state, seat)

            print(f"\n{agent.name} (seat {seat}): {cards_to_str(cards) if cards else 'Pass'}")

            obs, reward, terminated, truncated, info = env.step(cards)
            done = terminated or truncated
            step += 1

            time.sleep(args.delay)

        print("\n" + "=" * 60)
        print(f"Game over! Winner: {agents[info['winner']].name} (seat {info['winner']})")
        print(f"Steps: {step}")
        print("=" * 60)


def print_table(state: TableState):
    """打印牌桌 (只显示自己的手牌)"""
    print("\n" + "=" * 60)
    for seat, hand in enumerate(state.hands):
        marker = "*" if seat == state.current_player else " "
        if seat == HUMAN_SEAT:
            print(f"{marker}[you] ({len(hand)}): {cards_to_str(hand)}")
        else:
            print(f"{marker} seat {seat}: {len(hand)} cards")
    if state.last_combo is not None:
        print(f"\nTo beat: {state.last_combo} (seat {state.last_player})")
    else:
        print("\nTable is clear")
    print("=" * 60)


def human_turn(state: TableState) -> TableState:
    """人类玩家回合: 输入牌 (如 "3♣ 4♣ 5♦")，p 过牌，h 提示，q 退出"""
    while True:
        choice = input("\nYour play (cards / p=pass / h=hint / q=quit): ").strip()
        if choice.lower() == 'q':
            raise KeyboardInterrupt
        if choice.lower() == 'h':
            hint = choose_move(state, HUMAN_SEAT)
            print(f"Hint: {cards_to_str(hint) if hint else 'Pass'}")
            continue
        if choice.lower() == 'p':
            check = state.check_pass(HUMAN_SEAT)
            if check.ok:
                return state.with_pass(HUMAN_SEAT)
            print(f"Illegal: {check.reason}")
            continue

        try:
            cards = str_to_cards(choice)
        except InvalidConfiguration as e:
            print(f"Illegal: {e}")
            continue

        check = state.check_legal_move(HUMAN_SEAT, cards)
        if check.ok:
            print(f"\nYou play: {check.combo}")
            return state.with_move(HUMAN_SEAT, check.combo)
        print(f"Illegal: {check.reason}")


def play_game(args, config: GameConfig):
    """与 AI 对战"""
    rng = random.Random(config.seed)
    agents = create_agents(args, config.players)

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print(f"You are seat {HUMAN_SEAT}")
        print("=" * 60)

        state = TableState.from_config(config, rng)

        while not state.finished:
            print_table(state)
            seat = state.current_player

            if seat == HUMAN_SEAT:
                state = human_turn(state)
                continue

            cards = agents[seat].act(state, seat)
            check = state.check_legal_move(seat, cards) if cards else None
            if check is not None and check.ok:
                print(f"\n{agents[seat].name} plays: {check.combo}")
                state = state.with_move(seat, check.combo)
            else:
                print(f"\n{agents[seat].name} passes")
                state = state.with_pass(seat)
            time.sleep(args.delay)

        print("\n" + "=" * 60)
        if state.winner == HUMAN_SEAT:
            print("You win!")
        else:
            print(f"You lose! Winner: seat {state.winner}")
        print("=" * 60)


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        config = load_config(args)
    except InvalidConfiguration as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    print("=" * 60)
    print("Tien Len")
    print("=" * 60)

    try:
        if args.mode == "watch":
            watch_game(args, config)
        elif args.mode == "play":
            play_game(args, config)
    except KeyboardInterrupt:
        print("\nBye")


if __name__ == "__main__":
    main()
