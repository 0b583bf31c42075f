"""
Tien Len Gymnasium 环境

遵循标准 Gymnasium API，所有座位轮流在同一个环境中行动
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
import logging
import random

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from core.cards import NUM_CARDS, Card, cards_to_str
from core.combos import Combo
from core.config import GameConfig, MAX_PLAYERS
from core.errors import InvalidConfiguration
from core.heuristic import MoveHeuristic
from core.state import MoveCheck, TableState

from .observation import ObservationBuilder
from .reward import RewardCalculator, RewardConfig, RewardType

logger = logging.getLogger(__name__)

# 动作空间大小: 合法动作列表的索引上界
MAX_ACTIONS = 256

# 跟牌时 legal_actions[0] 为过牌
PASS_ACTION = None

Action = Union[None, int, np.integer, Combo, Sequence[Card]]


class TienLenEnv(gym.Env):
    """
    Tien Len Gymnasium 环境

    动作可以是:
    - info["legal_actions"] 中的索引
    - Combo 或牌序列
    - None (过牌)

    API:
    - reset() -> observation, info
    - step(action) -> observation, reward, terminated, truncated, info
    """

    metadata = {
        "render_modes": ["human", "ansi"],
        "name": "TienLen-v0",
    }

    def __init__(
        self,
        render_mode: Optional[str] = None,
        config: Optional[GameConfig] = None,
        reward_type: str = "sparse",
        agent_seat: Optional[int] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            render_mode: 渲染模式 ("human", "ansi", None)
            config: 游戏配置
            reward_type: 奖励类型 ("sparse", "shaped")
            agent_seat: 奖励视角座位 (None=刚行动的座位)
            seed: 随机种子 (覆盖 config.seed)
        """
        super().__init__()

        self.render_mode = render_mode
        self.config = (config or GameConfig()).validate()
        if agent_seat is not None and not 0 <= agent_seat < self.config.players:
            raise InvalidConfiguration(
                f"agent_seat must be between 0 and {self.config.players - 1}, got {agent_seat}"
            )
        self._agent_seat = agent_seat

        if seed is None:
            seed = self.config.seed
        self._rng = random.Random(seed)

        self._obs_builder = ObservationBuilder()
        self._reward_calculator = RewardCalculator(
            RewardConfig(reward_type=RewardType(reward_type))
        )
        self._heuristic = MoveHeuristic(max_straight_len=self.config.max_straight_len)

        self._state: Optional[TableState] = None
        self._prev_state: Optional[TableState] = None
        self._legal_actions: List[Optional[Combo]] = []

        self._define_spaces()

    def _define_spaces(self):
        """定义观测和动作空间"""
        self.action_space = spaces.Discrete(MAX_ACTIONS)

        self.observation_space = spaces.Dict({
            "hand": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "last_combo": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "played_cards": spaces.Box(0, 1, shape=(NUM_CARDS,), dtype=np.float32),
            "cards_left": spaces.Box(0, 1, shape=(MAX_PLAYERS,), dtype=np.float32),
            "position": spaces.Box(0, 1, shape=(MAX_PLAYERS,), dtype=np.float32),
            "passes": spaces.Box(0, MAX_PLAYERS, shape=(1,), dtype=np.float32),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        重置环境

        Args:
            seed: 随机种子 (重新设定发牌随机源)
            options: 额外选项

        Returns:
            (observation, info) 元组
        """
        super().reset(seed=seed)

        if seed is not None:
            self._rng = random.Random(seed)

        self._state = TableState.initial(
            self.config.players, self._rng, self.config.opening
        )
        self._prev_state = None
        self._legal_actions = self._compute_legal_actions()

        obs = self._build_observation()
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Action,
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        执行动作

        Args:
            action: 动作索引、Combo、牌序列或 None

        Returns:
            (observation, reward, terminated, truncated, info) 元组
        """
        if self._state is None:
            raise RuntimeError("Environment not reset. Call reset() first.")

        seat = self._state.current_player
        cards, check = self._decode_action(action, seat)

        if not check.ok:
            # 非法动作：给予惩罚并保持状态
            logger.debug(f"Seat {seat} illegal action: {check.reason}")
            obs = self._build_observation()
            info = self._build_info()
            info["error"] = str(check.reason)
            return obs, self._reward_calculator.config.illegal_penalty, False, False, info

        self._prev_state = self._state
        if cards is None:
            self._state = self._state.with_pass(seat)
        else:
            self._state = self._state.with_move(seat, check.combo)
        self._legal_actions = self._compute_legal_actions()

        obs = self._build_observation()
        reward = self._reward_calculator.compute(
            self._state,
            self._prev_state,
            self._agent_seat if self._agent_seat is not None else seat,
        )
        terminated = self._state.finished
        truncated = False
        info = self._build_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _decode_action(self, action: Action, seat: int) -> Tuple[Optional[Tuple[Card, ...]], MoveCheck]:
        """解码动作并校验，返回 (牌, 校验结果)；过牌时牌为 None"""
        if isinstance(action, (int, np.integer)) and not isinstance(action, bool):
            idx = int(action)
            if not 0 <= idx < len(self._legal_actions):
                raise ValueError(
                    f"Invalid action index: {idx}. "
                    f"Valid range: 0-{len(self._legal_actions) - 1}"
                )
            action = self._legal_actions[idx]

        if action is None:
            return None, self._state.check_pass(seat)

        if isinstance(action, Combo):
            cards = action.cards
        else:
            cards = tuple(action)
        return cards, self._state.check_legal_move(seat, cards)

    def _compute_legal_actions(self) -> List[Optional[Combo]]:
        """当前玩家的合法动作，跟牌时第一个为过牌"""
        state = self._state
        if state is None or state.finished:
            return []
        moves = self._heuristic.legal_moves(state, state.current_player)
        if state.last_combo is None:
            return moves
        return [PASS_ACTION] + moves

    def _build_observation(self) -> Dict[str, np.ndarray]:
        """构建观测"""
        return self._obs_builder.build(self._state, self._agent_seat).to_dict()

    def _build_info(self) -> Dict[str, Any]:
        """构建 info 字典"""
        info = {
            "current_player": self._state.current_player,
            "legal_actions": list(self._legal_actions),
            "step_count": self._state.step_count,
            "passes_in_row": self._state.passes_in_row,
            "last_player": self._state.last_player,
        }

        if self._state.finished:
            info["winner"] = self._state.winner

        return info

    def render(self) -> Optional[str]:
        """渲染环境"""
        if self.render_mode in ("ansi", "human"):
            return self._render_text()
        return None

    def _render_text(self) -> str:
        """文本渲染"""
        state = self._state
        lines = ["=" * 50]
        lines.append(f"Current Player: {state.current_player}")

        for seat, hand in enumerate(state.hands):
            lines.append(f"seat {seat}: {cards_to_str(hand)} ({len(hand)})")

        if state.last_combo is not None:
            lines.append(f"Last Combo: {state.last_combo} by seat {state.last_player}")
        lines.append(f"Passes: {state.passes_in_row}")

        if state.finished:
            lines.append(f"Winner: seat {state.winner}")

        lines.append("=" * 50)

        output = "\n".join(lines)
        if self.render_mode == "human":
            print(output)
        return output

    @property
    def state(self) -> Optional[TableState]:
        """获取当前状态"""
        return self._state

    def get_legal_actions(self) -> List[Optional[Combo]]:
        """获取当前合法动作"""
        return list(self._legal_actions)

    def sample_action(self) -> int:
        """随机采样一个合法动作的索引"""
        if not self._legal_actions:
            return 0
        return int(self.np_random.integers(len(self._legal_actions)))


def make_env(env_id: str = "TienLen-v0", **kwargs) -> TienLenEnv:
    """
    工厂函数：创建环境

    Args:
        env_id: 环境 ID
        **kwargs: 环境参数

    Returns:
        TienLenEnv 实例
    """
    return TienLenEnv(**kwargs)
