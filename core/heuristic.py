"""
出牌启发式 (AI)

贪心的单步打分，不做多轮前瞻搜索:
1. 枚举候选出牌，只保留 check_legal_move 通过的
2. 桌面为空时用首出打分，否则用跟牌打分
3. 取最高分，同分取枚举顺序靠前的
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from .cards import Card, cards_to_str
from .combos import Combo, ComboGenerator, ComboType, MAX_GENERATED_STRAIGHT_LEN
from .rules import RuleEngine
from .state import TableState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeuristicWeights:
    """
    打分权重

    首出:
        single: 单张
        mid_single: 中等点数单张 (点数索引 mid_low..mid_high)
        split_penalty: 拆开同点数的牌
        pair / triple / large: 按张数 2 / 3 / 4+ 的加分
        structure: 对子、三张额外加分
    跟牌:
        beat: 每单位比较结果的加分
        same_shape: 与桌面牌型、张数相同
        bomb_penalty: 使用炸弹的扣分
        excluded: 压不过的候选得分
    """
    single: int = 10
    mid_single: int = 5
    mid_low: int = 4
    mid_high: int = 9
    split_penalty: int = 3
    pair: int = 5
    triple: int = 3
    large: int = 1
    structure: int = 2
    beat: int = 10
    same_shape: int = 5
    bomb_penalty: int = 20
    excluded: int = -1000


class MoveHeuristic:
    """
    启发式出牌选择器

    只依赖牌桌的合法性校验，不修改状态
    """

    def __init__(
        self,
        weights: Optional[HeuristicWeights] = None,
        max_straight_len: int = MAX_GENERATED_STRAIGHT_LEN,
    ):
        self.weights = weights or HeuristicWeights()
        self.max_straight_len = max_straight_len

    def legal_moves(self, state: TableState, seat: int) -> List[Combo]:
        """
        枚举合法的候选出牌

        Args:
            state: 牌桌状态
            seat: 座位

        Returns:
            合法牌型列表 (保持枚举顺序)
        """
        if seat < 0 or seat >= state.players:
            return []
        generator = ComboGenerator(state.get_hand(seat), self.max_straight_len)
        moves = []
        for cards in generator.generate_all():
            check = state.check_legal_move(seat, cards)
            if check.ok:
                moves.append(check.combo)
        return moves

    def score_opening(self, combo: Combo, hand: Sequence[Card]) -> int:
        """首出打分"""
        w = self.weights
        score = 0
        size = len(combo)

        if size == 1:
            score += w.single
            card = combo.cards[0]
            if w.mid_low <= card.rank <= w.mid_high:
                score += w.mid_single
            # 打出后还剩同点数的牌: 拆散了对子
            if any(c.rank == card.rank and c != card for c in hand):
                score -= w.split_penalty
        elif size == 2:
            score += w.pair
        elif size == 3:
            score += w.triple
        else:
            score += w.large

        if combo.combo_type in (ComboType.PAIR, ComboType.TRIPLE):
            score += w.structure

        return score

    def score_following(self, combo: Combo, last_combo: Combo) -> int:
        """跟牌打分"""
        w = self.weights
        cmp = RuleEngine.compare_combos(last_combo, combo)
        if cmp <= 0:
            return w.excluded

        score = cmp * w.beat
        if combo.combo_type == last_combo.combo_type and len(combo) == len(last_combo):
            score += w.same_shape
        if combo.is_bomb:
            score -= w.bomb_penalty
        return score

    def choose(self, state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
        """
        选择出牌

        Args:
            state: 牌桌状态
            seat: 座位

        Returns:
            要出的牌，None 表示过牌
        """
        moves = self.legal_moves(state, seat)
        if not moves:
            return None

        hand = state.get_hand(seat)
        if state.last_combo is None:
            scored = [(self.score_opening(move, hand), move) for move in moves]
        else:
            scored = [(self.score_following(move, state.last_combo), move) for move in moves]
            scored = [(score, move) for score, move in scored if score > self.weights.excluded]
            if not scored:
                return None

        # max 返回第一个最大值，同分保持枚举顺序
        best_score, best = max(scored, key=lambda item: item[0])
        logger.debug(f"Seat {seat} plays {cards_to_str(best.cards)} (score {best_score}, {len(moves)} candidates)")
        return best.cards


_default_heuristic = MoveHeuristic()


def choose_move(state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
    """默认权重的启发式出牌，None 表示过牌"""
    return _default_heuristic.choose(state, seat)


def choose_move_simple(state: TableState, seat: int) -> Optional[Tuple[Card, ...]]:
    """
    简单出牌: 打出能出的最小单张，否则过牌

    作为基线对手
    """
    if seat < 0 or seat >= state.players:
        return None
    for card in state.get_hand(seat):
        check = state.check_legal_move(seat, [card])
        if check.ok:
            return check.combo.cards
    return None
