"""
牌的定义与编码

Tien Len 使用一副 52 张的标准扑克牌 (无王):
- 点数从小到大: 3, 4, 5, 6, 7, 8, 9, 10, J, Q, K, A, 2
- 花色只用于同点数比较: ♣ < ♦ < ♥ < ♠
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Dict
import random
import re

import numpy as np

from .errors import InvalidConfiguration


class Rank(IntEnum):
    """点数 (值即为大小顺序索引)"""
    THREE = 0
    FOUR = 1
    FIVE = 2
    SIX = 3
    SEVEN = 4
    EIGHT = 5
    NINE = 6
    TEN = 7
    JACK = 8
    QUEEN = 9
    KING = 10
    ACE = 11
    TWO = 12


class Suit(IntEnum):
    """花色 (仅用于比较平局)"""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


# 最大点数, 不能出现在顺子中
TOP_RANK = Rank.TWO

# 点数到显示字符的映射
RANK_TO_STR: Dict[Rank, str] = {
    Rank.THREE: '3', Rank.FOUR: '4', Rank.FIVE: '5', Rank.SIX: '6',
    Rank.SEVEN: '7', Rank.EIGHT: '8', Rank.NINE: '9', Rank.TEN: '10',
    Rank.JACK: 'J', Rank.QUEEN: 'Q', Rank.KING: 'K', Rank.ACE: 'A',
    Rank.TWO: '2',
}

# 显示字符到点数的映射
STR_TO_RANK: Dict[str, Rank] = {v: k for k, v in RANK_TO_STR.items()}

SUIT_TO_STR: Dict[Suit, str] = {
    Suit.CLUBS: '♣',
    Suit.DIAMONDS: '♦',
    Suit.HEARTS: '♥',
    Suit.SPADES: '♠',
}

STR_TO_SUIT: Dict[str, Suit] = {v: k for k, v in SUIT_TO_STR.items()}

NUM_CARDS = 52


@dataclass(frozen=True, order=True)
class Card:
    """
    不可变的牌

    字段顺序决定排序: 先点数后花色，即规范顺序
    """
    rank: Rank
    suit: Suit

    @property
    def index(self) -> int:
        """在 52 维编码中的位置"""
        return int(self.rank) * 4 + int(self.suit)

    def __str__(self) -> str:
        return card_to_str(self)

    def __repr__(self) -> str:
        return f"Card({card_to_str(self)})"


def card_to_str(card: Card) -> str:
    """牌转字符串, 如 "10♥" """
    return RANK_TO_STR[card.rank] + SUIT_TO_STR[card.suit]


def parse_card(s: str) -> Optional[Card]:
    """
    字符串转牌

    Args:
        s: 如 "3♣", "10♥", "J♦"

    Returns:
        牌，无法解析时返回 None
    """
    if not isinstance(s, str) or len(s) < 2:
        return None
    rank = STR_TO_RANK.get(s[:-1])
    suit = STR_TO_SUIT.get(s[-1])
    if rank is None or suit is None:
        return None
    return Card(rank, suit)


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    """按规范顺序 (点数, 花色) 排序"""
    return sorted(cards)


def build_deck() -> List[Card]:
    """
    生成一副完整的 52 张牌

    顺序固定: 花色为主序 (♣ ♦ ♥ ♠)，点数为次序 (3..2)
    """
    return [Card(rank, suit) for suit in Suit for rank in Rank]


# 完整牌组 (52 张)
FULL_DECK: Tuple[Card, ...] = tuple(build_deck())


def shuffle(cards: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates 洗牌，不修改输入

    Args:
        cards: 牌序列
        rng: 均匀随机源 (需提供 .random())，None 时使用系统随机源

    Returns:
        洗好的新列表
    """
    if rng is None:
        rng = random.SystemRandom()
    result = list(cards)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def deal(deck: Sequence[Card], players: int) -> List[List[Card]]:
    """
    轮流发牌: 第 i 张牌发给 i % players 号座位

    不要求 52 能被人数整除 (3 人时手牌为 18/17/17)

    Args:
        deck: 牌组
        players: 人数

    Returns:
        各座位手牌 (已排序)
    """
    if not isinstance(players, int) or players <= 0:
        raise InvalidConfiguration(f"Invalid player count: {players}")
    if players > len(deck):
        raise InvalidConfiguration(
            f"Cannot deal {len(deck)} cards to {players} players"
        )

    hands: List[List[Card]] = [[] for _ in range(players)]
    for i, card in enumerate(deck):
        hands[i % players].append(card)
    return [sort_cards(hand) for hand in hands]


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3♣ 4♣ 5♦"
    """
    return ' '.join(card_to_str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 以空格或逗号分隔，如 "3♣, 3♦, 3♥"

    Returns:
        牌列表 (保持输入顺序)
    """
    cards = []
    for token in re.split(r'[\s,]+', s.strip()):
        if not token:
            continue
        card = parse_card(token)
        if card is None:
            raise InvalidConfiguration(f"Malformed card token: {token!r}")
        cards.append(card)
    return cards


def cards_to_array(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌列表转换为 52 维 one-hot 向量

    编码方式: 位置 rank * 4 + suit

    Args:
        cards: 牌列表

    Returns:
        52 维 numpy 数组
    """
    array = np.zeros(NUM_CARDS, dtype=np.float32)
    for card in cards:
        array[card.index] = 1
    return array


def array_to_cards(array: np.ndarray) -> List[Card]:
    """
    将 52 维数组转换回牌列表

    Returns:
        牌列表 (规范顺序)
    """
    indices = np.flatnonzero(np.asarray(array)[:NUM_CARDS] > 0)
    return [Card(Rank(int(i) // 4), Suit(int(i) % 4)) for i in indices]
