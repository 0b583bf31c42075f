"""
游戏配置
"""
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json

from .cards import Card, parse_card
from .combos import MIN_STRAIGHT_LEN, MAX_GENERATED_STRAIGHT_LEN
from .errors import InvalidConfiguration


# 支持的人数
MIN_PLAYERS = 2
MAX_PLAYERS = 4


@dataclass
class GameConfig:
    """
    游戏配置

    Attributes:
        players: 人数 (2-4)
        opening_card: 持有此牌的玩家先出
        max_straight_len: AI 候选顺子的最大长度
        seed: 随机种子，None 表示不固定
    """
    players: int = 4
    opening_card: str = "3♣"
    max_straight_len: int = MAX_GENERATED_STRAIGHT_LEN
    seed: Optional[int] = None

    def validate(self) -> 'GameConfig':
        """校验配置，非法时抛出 InvalidConfiguration"""
        if not isinstance(self.players, int) or not MIN_PLAYERS <= self.players <= MAX_PLAYERS:
            raise InvalidConfiguration(
                f"players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {self.players}"
            )
        if parse_card(self.opening_card) is None:
            raise InvalidConfiguration(f"Malformed opening card: {self.opening_card!r}")
        if self.max_straight_len < MIN_STRAIGHT_LEN:
            raise InvalidConfiguration(
                f"max_straight_len must be at least {MIN_STRAIGHT_LEN}, got {self.max_straight_len}"
            )
        return self

    @property
    def opening(self) -> Card:
        card = parse_card(self.opening_card)
        if card is None:
            raise InvalidConfiguration(f"Malformed opening card: {self.opening_card!r}")
        return card

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered).validate()

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'GameConfig':
        """从 JSON 文件读取配置"""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidConfiguration(f"Invalid config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"Config file {path} must contain a JSON object")
        return cls.from_dict(data)
