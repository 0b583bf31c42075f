"""
牌桌状态定义

使用不可变数据结构，支持:
- 每次出牌/过牌返回新状态 (旧状态不变)
- 直接比较状态值 (便于测试)
- 单桌单写者的并发约束
"""
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple
import logging
import random

from .cards import Card, Rank, Suit, build_deck, cards_to_str, deal, shuffle
from .combos import Combo
from .config import GameConfig, MIN_PLAYERS, MAX_PLAYERS
from .errors import InvalidConfiguration, MoveError
from .rules import RuleEngine

logger = logging.getLogger(__name__)


# 默认首出牌: 持有梅花3的玩家先出
OPENING_CARD = Card(Rank.THREE, Suit.CLUBS)


@dataclass(frozen=True)
class MoveCheck:
    """
    出牌校验结果

    Attributes:
        ok: 是否合法
        reason: 不合法的原因
        combo: 识别出的牌型 (DOES_NOT_BEAT 时也会给出)
    """
    ok: bool
    reason: Optional[MoveError] = None
    combo: Optional[Combo] = None


@dataclass(frozen=True)
class TableState:
    """
    不可变牌桌状态

    Attributes:
        players: 人数
        hands: 各座位手牌 (已排序)
        current_player: 当前行动座位
        last_combo: 需要压过的牌，None 表示桌面已清空
        last_player: 打出 last_combo 的座位
        passes_in_row: last_combo 之后连续过牌次数
        started: 是否已发牌
        finished: 是否已结束
        winner: 出完牌的座位
        play_history: 出牌历史 ((seat, cards), ...)，过牌记为空
        step_count: 当前步数
    """
    players: int
    hands: Tuple[Tuple[Card, ...], ...]
    current_player: int = 0
    last_combo: Optional[Combo] = None
    last_player: Optional[int] = None
    passes_in_row: int = 0
    started: bool = False
    finished: bool = False
    winner: Optional[int] = None
    play_history: Tuple[Tuple[int, Tuple[Card, ...]], ...] = ()
    step_count: int = 0

    @classmethod
    def initial(
        cls,
        players: int = 4,
        rng: Optional[random.Random] = None,
        opening_card: Card = OPENING_CARD,
    ) -> 'TableState':
        """
        创建初始牌桌: 洗牌、发牌、确定先出的座位

        Args:
            players: 人数 (2-4)
            rng: 随机源，None 时使用系统随机源
            opening_card: 持有此牌的座位先出

        Returns:
            初始状态
        """
        if not isinstance(players, int) or not MIN_PLAYERS <= players <= MAX_PLAYERS:
            raise InvalidConfiguration(
                f"players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {players}"
            )

        deck = shuffle(build_deck(), rng)
        hands = tuple(tuple(hand) for hand in deal(deck, players))

        starter = 0
        for seat, hand in enumerate(hands):
            if opening_card in hand:
                starter = seat
                break

        logger.debug(f"Dealt {players} hands, seat {starter} holds {opening_card} and starts")

        return cls(
            players=players,
            hands=hands,
            current_player=starter,
            started=True,
        )

    @classmethod
    def from_config(cls, config: GameConfig, rng: Optional[random.Random] = None) -> 'TableState':
        """按配置创建初始牌桌 (未提供 rng 时使用配置中的种子)"""
        config.validate()
        if rng is None and config.seed is not None:
            rng = random.Random(config.seed)
        return cls.initial(config.players, rng, config.opening)

    def get_hand(self, seat: int) -> Tuple[Card, ...]:
        """获取指定座位的手牌"""
        return self.hands[seat]

    @property
    def total_cards(self) -> int:
        """所有手牌总数"""
        return sum(len(hand) for hand in self.hands)

    @property
    def is_table_clear(self) -> bool:
        return self.last_combo is None

    @property
    def is_finished(self) -> bool:
        return self.finished

    def _check_turn(self, seat: int) -> Optional[MoveError]:
        if self.finished:
            return MoveError.GAME_FINISHED
        if not self.started:
            return MoveError.NOT_STARTED
        if seat != self.current_player:
            return MoveError.NOT_YOUR_TURN
        return None

    def check_legal_move(self, seat: int, cards: Iterable[Card]) -> MoveCheck:
        """
        校验出牌是否合法

        Args:
            seat: 出牌座位
            cards: 要出的牌

        Returns:
            校验结果，合法时带有识别出的牌型
        """
        reason = self._check_turn(seat)
        if reason is not None:
            return MoveCheck(ok=False, reason=reason)

        # 每张牌都必须在手牌中 (重复提交同一张牌不合法)
        cards = list(cards)
        remaining = list(self.hands[seat])
        for card in cards:
            if card not in remaining:
                return MoveCheck(ok=False, reason=MoveError.CARD_NOT_IN_HAND)
            remaining.remove(card)

        combo = RuleEngine.detect_combo(cards)
        if combo is None:
            return MoveCheck(ok=False, reason=MoveError.INVALID_COMBO)

        # 桌面已清空: 任何牌型都可以出
        if self.last_combo is None:
            return MoveCheck(ok=True, combo=combo)

        # 跟牌: 需要压过桌面的牌
        if RuleEngine.beats(self.last_combo, combo):
            return MoveCheck(ok=True, combo=combo)
        return MoveCheck(ok=False, reason=MoveError.DOES_NOT_BEAT, combo=combo)

    def check_pass(self, seat: int) -> MoveCheck:
        """校验过牌 (能压也可以过，不强制出牌)"""
        reason = self._check_turn(seat)
        if reason is not None:
            return MoveCheck(ok=False, reason=reason)
        return MoveCheck(ok=True)

    def with_move(self, seat: int, combo: Combo) -> 'TableState':
        """
        出牌后的新状态

        前置条件: combo 已通过 check_legal_move 校验

        Args:
            seat: 出牌座位
            combo: 牌型

        Returns:
            新状态
        """
        if self.finished:
            logger.debug(f"Ignoring move by seat {seat}: game finished")
            return self

        hand = list(self.hands[seat])
        for card in combo.cards:
            hand.remove(card)

        new_hands = self.hands[:seat] + (tuple(hand),) + self.hands[seat + 1:]

        finished = not hand
        if finished:
            logger.debug(f"Seat {seat} emptied its hand and wins")

        return replace(
            self,
            hands=new_hands,
            last_combo=combo,
            last_player=seat,
            passes_in_row=0,
            finished=finished,
            winner=seat if finished else None,
            current_player=(seat + 1) % self.players,
            play_history=self.play_history + ((seat, combo.cards),),
            step_count=self.step_count + 1,
        )

    def with_pass(self, seat: int) -> 'TableState':
        """
        过牌后的新状态

        除最后出牌者外所有人都过牌时 (players - 1 次)，清空桌面

        Args:
            seat: 过牌座位

        Returns:
            新状态
        """
        if self.finished:
            logger.debug(f"Ignoring pass by seat {seat}: game finished")
            return self

        passes = self.passes_in_row + 1
        last_combo = self.last_combo
        last_player = self.last_player
        if passes >= self.players - 1:
            if last_combo is not None:
                logger.debug(f"Table cleared after {passes} passes, seat {last_player} leads")
            last_combo = None
            last_player = None
            passes = 0

        return replace(
            self,
            last_combo=last_combo,
            last_player=last_player,
            passes_in_row=passes,
            current_player=(seat + 1) % self.players,
            play_history=self.play_history + ((seat, ()),),
            step_count=self.step_count + 1,
        )

    def __str__(self) -> str:
        lines = [f"TableState(players={self.players}, current={self.current_player})"]
        for seat, hand in enumerate(self.hands):
            lines.append(f"  seat {seat} ({len(hand)}): {cards_to_str(hand)}")
        lines.append(f"  last: {self.last_combo if self.last_combo else '-'}")
        return "\n".join(lines)


def init_game(
    players: int = 4,
    rng: Optional[random.Random] = None,
    opening_card: Card = OPENING_CARD,
) -> TableState:
    """创建新一局"""
    return TableState.initial(players, rng, opening_card)


def check_legal_move(state: TableState, seat: int, cards: Iterable[Card]) -> MoveCheck:
    return state.check_legal_move(seat, cards)


def check_pass(state: TableState, seat: int) -> MoveCheck:
    return state.check_pass(seat)


def apply_move(state: TableState, seat: int, combo: Combo) -> TableState:
    return state.with_move(seat, combo)


def apply_pass(state: TableState, seat: int) -> TableState:
    return state.with_pass(seat)
