"""
规则引擎 - 牌型检测、大小比较

所有方法都是纯函数，无状态
"""
from typing import Iterable, List, Optional

from .cards import Card, TOP_RANK, sort_cards
from .combos import Combo, ComboType, MIN_STRAIGHT_LEN


class RuleEngine:
    """
    Tien Len 规则引擎

    提供牌型检测、大小比较功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_consecutive(ranks: List[int]) -> bool:
        """
        检查点数列表是否连续

        Args:
            ranks: 已排序的点数列表

        Returns:
            是否连续
        """
        for i in range(len(ranks) - 1):
            if ranks[i + 1] - ranks[i] != 1:
                return False
        return True

    @staticmethod
    def is_straight(cards: List[Card]) -> bool:
        """
        检查是否为顺子

        至少3张，点数不重复、严格连续，且不含2

        Args:
            cards: 已排序的牌列表
        """
        if len(cards) < MIN_STRAIGHT_LEN:
            return False
        ranks = [card.rank for card in cards]
        if TOP_RANK in ranks:
            return False
        if len(set(ranks)) != len(ranks):
            return False
        return RuleEngine.is_consecutive(ranks)

    @staticmethod
    def detect_combo(cards: Iterable[Card]) -> Optional[Combo]:
        """
        检测牌型

        Args:
            cards: 牌列表 (无序)

        Returns:
            牌型，不成牌型返回 None
        """
        cards = sort_cards(cards)
        n = len(cards)
        if n == 0:
            return None

        same_rank = all(card.rank == cards[0].rank for card in cards)

        # 单张
        if n == 1:
            return Combo(ComboType.SINGLE, tuple(cards), cards[0].rank)

        # 对子
        if n == 2:
            if same_rank:
                return Combo(ComboType.PAIR, tuple(cards), cards[0].rank)
            return None

        # 三张
        if n == 3 and same_rank:
            return Combo(ComboType.TRIPLE, tuple(cards), cards[0].rank)

        # 炸弹
        if n == 4 and same_rank:
            return Combo(ComboType.BOMB, tuple(cards), cards[0].rank)

        # 顺子: 主点数取最大一张
        if RuleEngine.is_straight(cards):
            return Combo(ComboType.STRAIGHT, tuple(cards), cards[-1].rank)

        return None

    @staticmethod
    def compare_combos(prev: Combo, next_: Combo) -> int:
        """
        比较两个牌型: next_ 能否压过 prev

        Args:
            prev: 桌面上的牌
            next_: 要出的牌

        Returns:
            1 if next_ > prev, -1 if next_ < prev 或牌型不匹配, 0 if 完全相同
        """
        # 桌面是炸弹: 只有更大的炸弹能压
        if prev.combo_type == ComboType.BOMB:
            if next_.combo_type == ComboType.BOMB:
                return _sign(next_.primary_rank - prev.primary_rank)
            return -1

        # 炸弹压任何非炸弹
        if next_.combo_type == ComboType.BOMB:
            return 1

        # 牌型和张数必须完全一致
        if prev.combo_type != next_.combo_type:
            return -1
        if len(prev) != len(next_):
            return -1

        cmp = _sign(next_.primary_rank - prev.primary_rank)
        if cmp != 0:
            return cmp

        # 主点数相同: 比较最大一张的花色
        return _sign(next_.highest_card.suit - prev.highest_card.suit)

    @staticmethod
    def beats(prev: Combo, next_: Combo) -> bool:
        """next_ 是否能压过 prev"""
        return RuleEngine.compare_combos(prev, next_) > 0


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


# 对外接口
detect = RuleEngine.detect_combo
compare = RuleEngine.compare_combos
