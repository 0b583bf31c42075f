"""
牌型定义与候选出牌生成器

Tien Len 共有 5 种牌型: 单张、对子、三张、顺子、炸弹 (四张相同)
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .cards import Card, Rank, TOP_RANK, cards_to_str, sort_cards


class ComboType(IntEnum):
    """牌型"""
    SINGLE = 1    # 单张
    PAIR = 2      # 对子
    TRIPLE = 3    # 三张
    STRAIGHT = 4  # 顺子 (至少3张, 不含2)
    BOMB = 5      # 炸弹 (四张相同)


# 顺子最小长度
MIN_STRAIGHT_LEN = 3
# 候选生成时顺子的最大长度
MAX_GENERATED_STRAIGHT_LEN = 10


@dataclass(frozen=True, slots=True)
class Combo:
    """
    不可变牌型

    Attributes:
        combo_type: 牌型
        cards: 组成牌 (按点数、花色排序)
        primary_rank: 主点数 (对子/三张/炸弹为共同点数，顺子为最大点数)
    """
    combo_type: ComboType
    cards: Tuple[Card, ...]
    primary_rank: Rank

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> Optional['Combo']:
        """从牌列表识别牌型，不成牌型返回 None"""
        from .rules import RuleEngine
        return RuleEngine.detect_combo(cards)

    @property
    def is_bomb(self) -> bool:
        return self.combo_type == ComboType.BOMB

    @property
    def highest_card(self) -> Card:
        """排序后的最大一张 (用于花色比较)"""
        return self.cards[-1]

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return f"{self.combo_type.name.lower()} [{cards_to_str(self.cards)}]"


class ComboGenerator:
    """
    候选出牌生成器

    每种点数只取前几张牌组成对子/三张/顺子，不做完全组合枚举
    """

    def __init__(self, hand_cards: Iterable[Card], max_straight_len: int = MAX_GENERATED_STRAIGHT_LEN):
        """
        Args:
            hand_cards: 手牌列表
            max_straight_len: 生成顺子的最大长度
        """
        self.hand = sort_cards(hand_cards)
        self.max_straight_len = max_straight_len

        # 按点数分组 (点数升序，组内保持手牌顺序)
        self.rank_groups: Dict[Rank, List[Card]] = {}
        for card in self.hand:
            self.rank_groups.setdefault(card.rank, []).append(card)

    def gen_singles(self) -> List[List[Card]]:
        """生成所有单张"""
        return [[card] for card in self.hand]

    def gen_same_rank(self) -> List[List[Card]]:
        """
        按点数升序生成对子和三张

        同一点数先对子后三张，均取该点数的前几张
        """
        result = []
        for cards in self.rank_groups.values():
            for size in (2, 3):
                if len(cards) >= size:
                    result.append(cards[:size])
        return result

    def gen_pairs(self) -> List[List[Card]]:
        """生成对子 (每种点数一个)"""
        return [cards for cards in self.gen_same_rank() if len(cards) == 2]

    def gen_triples(self) -> List[List[Card]]:
        """生成三张 (每种点数一个)"""
        return [cards for cards in self.gen_same_rank() if len(cards) == 3]

    def gen_bombs(self) -> List[List[Card]]:
        """生成炸弹"""
        return [list(cards) for cards in self.rank_groups.values() if len(cards) == 4]

    def gen_straights(self) -> List[List[Card]]:
        """
        生成顺子

        枚举每个起始点数和每个长度 (MIN_STRAIGHT_LEN..max_straight_len)，
        每个点数取第一张可用的牌
        """
        result = []
        ranks = list(Rank)
        for start in range(len(ranks) - MIN_STRAIGHT_LEN + 1):
            max_len = min(self.max_straight_len, len(ranks) - start)
            for length in range(MIN_STRAIGHT_LEN, max_len + 1):
                window = ranks[start:start + length]
                # 2 不能参与顺子
                if TOP_RANK in window:
                    break
                if not all(rank in self.rank_groups for rank in window):
                    break
                result.append([self.rank_groups[rank][0] for rank in window])
        return result

    def generate_all(self) -> List[List[Card]]:
        """
        生成所有候选出牌

        顺序: 单张，按点数的对子/三张，顺子，炸弹
        """
        candidates = self.gen_singles()
        candidates.extend(self.gen_same_rank())
        candidates.extend(self.gen_straights())
        candidates.extend(self.gen_bombs())
        return candidates
