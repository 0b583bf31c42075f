"""启发式出牌测试"""
import random

import pytest

from core.cards import str_to_cards
from core.combos import ComboType
from core.rules import detect
from core.state import TableState
from core.heuristic import (
    HeuristicWeights,
    MoveHeuristic,
    choose_move,
    choose_move_simple,
)


def make_table(*hands: str, current: int = 0, last: str = None, last_player: int = None) -> TableState:
    return TableState(
        players=len(hands),
        hands=tuple(tuple(sorted(str_to_cards(h))) for h in hands),
        current_player=current,
        last_combo=detect(str_to_cards(last)) if last else None,
        last_player=last_player,
        started=True,
    )


def combo(s: str):
    return detect(str_to_cards(s))


class TestLegalMoves:
    """候选枚举测试"""

    def test_clear_table_all_candidates(self):
        state = make_table("3♣ 3♦ 4♣ 5♣", "K♠")
        moves = MoveHeuristic().legal_moves(state, 0)
        # 4 张单张 + 1 对 + 1 个顺子
        assert len(moves) == 6
        assert moves[4].combo_type == ComboType.PAIR
        assert moves[5].combo_type == ComboType.STRAIGHT

    def test_following_filters(self):
        state = make_table("3♣ 3♦ 9♠ 2♥", "K♠", last="8♣", last_player=1)
        moves = MoveHeuristic().legal_moves(state, 0)
        assert [str(m.cards[0]) for m in moves] == ["9♠", "2♥"]

    def test_not_your_turn(self):
        state = make_table("3♣", "K♠")
        assert MoveHeuristic().legal_moves(state, 1) == []

    def test_seat_out_of_range(self):
        state = make_table("3♣", "K♠")
        assert MoveHeuristic().legal_moves(state, 5) == []
        assert MoveHeuristic().legal_moves(state, -1) == []


class TestOpeningScore:
    """首出打分测试"""

    def test_low_single_breaking_pair(self):
        hand = str_to_cards("3♣ 3♦ 9♠")
        assert MoveHeuristic().score_opening(combo("3♣"), hand) == 10 - 3

    def test_mid_single(self):
        # 7 的点数索引为 4
        hand = str_to_cards("7♣ 9♠")
        assert MoveHeuristic().score_opening(combo("7♣"), hand) == 10 + 5

    def test_high_single(self):
        hand = str_to_cards("K♣")
        assert MoveHeuristic().score_opening(combo("K♣"), hand) == 10

    def test_mid_range_bounds(self):
        heuristic = MoveHeuristic()
        assert heuristic.score_opening(combo("6♣"), []) == 10
        assert heuristic.score_opening(combo("Q♣"), []) == 15
        assert heuristic.score_opening(combo("K♣"), []) == 10

    def test_pair(self):
        assert MoveHeuristic().score_opening(combo("5♣ 5♦"), []) == 5 + 2

    def test_triple(self):
        assert MoveHeuristic().score_opening(combo("5♣ 5♦ 5♥"), []) == 3 + 2

    def test_three_card_straight(self):
        # 按张数计分
        assert MoveHeuristic().score_opening(combo("5♣ 6♦ 7♥"), []) == 3

    def test_long_straight_and_bomb(self):
        heuristic = MoveHeuristic()
        assert heuristic.score_opening(combo("5♣ 6♦ 7♥ 8♠ 9♣"), []) == 1
        assert heuristic.score_opening(combo("5♣ 5♦ 5♥ 5♠"), []) == 1

    def test_custom_weights(self):
        heuristic = MoveHeuristic(HeuristicWeights(single=1, mid_single=0))
        assert heuristic.score_opening(combo("7♣"), []) == 1


class TestFollowingScore:
    """跟牌打分测试"""

    def test_same_shape(self):
        assert MoveHeuristic().score_following(combo("6♣"), combo("5♣")) == 10 + 5

    def test_excluded(self):
        assert MoveHeuristic().score_following(combo("4♣"), combo("5♣")) == -1000
        assert MoveHeuristic().score_following(combo("6♣ 6♦"), combo("5♣")) == -1000

    def test_bomb_penalty(self):
        assert MoveHeuristic().score_following(combo("7♣ 7♦ 7♥ 7♠"), combo("2♥")) == 10 - 20

    def test_bomb_on_bomb(self):
        score = MoveHeuristic().score_following(combo("9♣ 9♦ 9♥ 9♠"), combo("7♣ 7♦ 7♥ 7♠"))
        assert score == 10 + 5 - 20


class TestChooseMove:
    """选牌测试"""

    def test_opening_prefers_mid_single(self):
        state = make_table("3♣ 3♦ 7♠ K♥", "A♠")
        assert choose_move(state, 0) == tuple(str_to_cards("7♠"))

    def test_following_tie_goes_to_earliest(self):
        state = make_table("4♦ 6♦ 2♠", "A♠", last="5♣", last_player=1)
        assert choose_move(state, 0) == tuple(str_to_cards("6♦"))

    def test_prefers_pair_over_bomb(self):
        state = make_table("3♣ 3♦ 3♥ 3♠ 10♣ 10♦", "A♠", last="9♣ 9♦", last_player=1)
        assert choose_move(state, 0) == tuple(str_to_cards("10♣ 10♦"))

    def test_bomb_when_only_option(self):
        state = make_table("4♣ 7♣ 7♦ 7♥ 7♠", "A♠", last="2♥", last_player=1)
        assert choose_move(state, 0) == tuple(str_to_cards("7♣ 7♦ 7♥ 7♠"))

    def test_pass_when_nothing_beats(self):
        state = make_table("3♣ 4♦", "A♠", last="2♠", last_player=1)
        assert choose_move(state, 0) is None

    def test_pass_when_not_your_turn(self):
        state = make_table("3♣ 4♦", "A♠")
        assert choose_move(state, 1) is None

    def test_does_not_mutate_state(self):
        state = make_table("3♣ 3♦ 7♠ K♥", "A♠")
        before = state.hands
        choose_move(state, 0)
        assert state.hands == before

    @pytest.mark.parametrize("players", [2, 3, 4])
    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
    def test_always_legal_in_full_game(self, players, seed):
        state = TableState.initial(players, random.Random(seed))
        steps = 0

        while not state.finished and steps < 2000:
            seat = state.current_player
            cards = choose_move(state, seat)

            if cards is None:
                # 桌面清空时总能出单张
                assert state.last_combo is not None
                state = state.with_pass(seat)
            else:
                check = state.check_legal_move(seat, cards)
                assert check.ok, check.reason
                total = state.total_cards
                state = state.with_move(seat, check.combo)
                assert state.total_cards == total - len(cards)
            steps += 1

        assert state.finished
        assert len(state.get_hand(state.winner)) == 0


class TestChooseMoveSimple:
    """简单 AI 测试"""

    def test_lowest_single(self):
        state = make_table("5♦ 9♠ K♥", "A♠")
        assert choose_move_simple(state, 0) == tuple(str_to_cards("5♦"))

    def test_lowest_beating_single(self):
        state = make_table("5♦ 9♠ K♥", "A♠", last="8♣", last_player=1)
        assert choose_move_simple(state, 0) == tuple(str_to_cards("9♠"))

    def test_pass_on_pair(self):
        state = make_table("5♦ 5♠ 9♠", "A♠", last="4♣ 4♦", last_player=1)
        assert choose_move_simple(state, 0) is None

    def test_out_of_range_seat(self):
        state = make_table("5♦", "A♠")
        assert choose_move_simple(state, 3) is None
