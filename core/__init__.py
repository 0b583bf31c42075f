"""
Core Layer - 纯游戏逻辑 (无 ML 依赖)

Modules:
    cards: 牌定义与编码
    combos: 牌型与候选生成
    rules: 规则引擎
    state: 牌桌状态
    heuristic: 启发式出牌
    config: 游戏配置
    errors: 错误定义
"""
from .cards import (
    Rank,
    Suit,
    Card,
    TOP_RANK,
    FULL_DECK,
    RANK_TO_STR,
    SUIT_TO_STR,
    build_deck,
    shuffle,
    deal,
    sort_cards,
    card_to_str,
    parse_card,
    cards_to_str,
    str_to_cards,
    cards_to_array,
    array_to_cards,
)

from .combos import (
    ComboType,
    Combo,
    ComboGenerator,
    MIN_STRAIGHT_LEN,
    MAX_GENERATED_STRAIGHT_LEN,
)

from .rules import RuleEngine, detect, compare

from .state import (
    OPENING_CARD,
    MoveCheck,
    TableState,
    init_game,
    check_legal_move,
    check_pass,
    apply_move,
    apply_pass,
)

from .heuristic import (
    HeuristicWeights,
    MoveHeuristic,
    choose_move,
    choose_move_simple,
)

from .config import GameConfig, MIN_PLAYERS, MAX_PLAYERS

from .errors import TienLenError, InvalidConfiguration, MoveError

__all__ = [
    # cards
    "Rank",
    "Suit",
    "Card",
    "TOP_RANK",
    "FULL_DECK",
    "RANK_TO_STR",
    "SUIT_TO_STR",
    "build_deck",
    "shuffle",
    "deal",
    "sort_cards",
    "card_to_str",
    "parse_card",
    "cards_to_str",
    "str_to_cards",
    "cards_to_array",
    "array_to_cards",
    # combos
    "ComboType",
    "Combo",
    "ComboGenerator",
    "MIN_STRAIGHT_LEN",
    "MAX_GENERATED_STRAIGHT_LEN",
    # rules
    "RuleEngine",
    "detect",
    "compare",
    # state
    "OPENING_CARD",
    "MoveCheck",
    "TableState",
    "init_game",
    "check_legal_move",
    "check_pass",
    "apply_move",
    "apply_pass",
    # heuristic
    "HeuristicWeights",
    "MoveHeuristic",
    "choose_move",
    "choose_move_simple",
    # config
    "GameConfig",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    # errors
    "TienLenError",
    "InvalidConfiguration",
    "MoveError",
]
