"""
错误定义

- MoveError: 出牌/过牌被拒绝的原因 (作为结果返回，不抛出)
- InvalidConfiguration: 配置错误 (人数、牌面字符串等)，作为异常抛出
"""
from enum import Enum


class TienLenError(Exception):
    """Tien Len 引擎基础异常类"""
    pass


class InvalidConfiguration(TienLenError, ValueError):
    """配置错误: 非法人数、无法解析的牌面等"""
    pass


class MoveError(str, Enum):
    """出牌被拒绝的原因"""
    GAME_FINISHED = "game finished"
    NOT_STARTED = "game not started"
    NOT_YOUR_TURN = "not your turn"
    CARD_NOT_IN_HAND = "card not in hand"
    INVALID_COMBO = "invalid combo"
    DOES_NOT_BEAT = "does not beat last combo"

    def __str__(self) -> str:
        return self.value
