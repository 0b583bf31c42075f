"""环境层测试"""
import random

import pytest
import numpy as np

from core.cards import str_to_cards
from core.combos import Combo
from core.config import GameConfig
from core.rules import detect
from core.state import TableState


def make_table(*hands: str, current: int = 0, last: str = None, last_player: int = None) -> TableState:
    return TableState(
        players=len(hands),
        hands=tuple(tuple(sorted(str_to_cards(h))) for h in hands),
        current_player=current,
        last_combo=detect(str_to_cards(last)) if last else None,
        last_player=last_player,
        started=True,
    )


class TestObservationBuilder:
    """ObservationBuilder 测试"""

    def test_build(self):
        from env.observation import ObservationBuilder

        state = TableState.initial(4, random.Random(0))
        obs = ObservationBuilder().build(state)

        assert obs.hand.shape == (52,)
        assert obs.hand.sum() == 13
        assert obs.last_combo.sum() == 0
        assert obs.played_cards.sum() == 0
        assert obs.cards_left.shape == (4,)
        assert obs.position.shape == (4,)
        assert obs.position.sum() == 1  # one-hot
        assert obs.position[0] == 1     # 视角即当前玩家

    def test_perspective(self):
        from env.observation import ObservationBuilder

        state = make_table("3♣ 4♦", "5♣", "6♣ 7♣ 8♣", current=2)
        obs = ObservationBuilder().build(state, perspective=0)

        assert obs.hand.sum() == 2
        # 相对座位: 当前玩家在视角之后第 2 位
        assert obs.position[2] == 1
        np.testing.assert_allclose(obs.cards_left[:3], np.array([2, 1, 3]) / 26, rtol=1e-6)
        assert obs.cards_left[3] == 0

    def test_last_combo_and_played(self):
        from env.observation import ObservationBuilder

        state = make_table("3♣ 9♠", "5♣ 6♣", "7♥")
        state = state.with_move(0, detect(str_to_cards("9♠")))
        state = state.with_pass(1)
        obs = ObservationBuilder().build(state)

        assert obs.last_combo.sum() == 1
        assert obs.played_cards.sum() == 1
        assert obs.passes[0] == 1

    def test_to_dict(self):
        from env.observation import ObservationBuilder

        obs = ObservationBuilder().build(TableState.initial(3, random.Random(0)))
        obs_dict = obs.to_dict()

        assert set(obs_dict) == {"hand", "last_combo", "played_cards", "cards_left", "position", "passes"}

    def test_to_flat_array(self):
        from env.observation import ObservationBuilder

        obs = ObservationBuilder().build(TableState.initial(3, random.Random(0)))
        flat = obs.to_flat_array()

        assert isinstance(flat, np.ndarray)
        assert flat.ndim == 1
        assert flat.shape == (52 * 3 + 4 + 4 + 1,)


class TestRewardCalculator:
    """RewardCalculator 测试"""

    def test_sparse_not_finished(self):
        from env.reward import RewardCalculator

        state = make_table("3♣ 4♣", "5♣")
        assert RewardCalculator().compute(state, seat=0) == 0.0

    def test_sparse_win_and_lose(self):
        from env.reward import RewardCalculator

        state = make_table("3♣", "5♣ 6♣").with_move(0, detect(str_to_cards("3♣")))
        calc = RewardCalculator()
        assert calc.compute(state, seat=0) == 1.0
        assert calc.compute(state, seat=1) == -1.0

    def test_card_penalty(self):
        from env.reward import RewardCalculator, RewardConfig

        state = make_table("3♣", "5♣ 6♣").with_move(0, detect(str_to_cards("3♣")))
        calc = RewardCalculator(RewardConfig(card_penalty=0.1))
        assert calc.compute(state, seat=1) == pytest.approx(-1.2)

    def test_shaped(self):
        from env.reward import RewardCalculator, RewardConfig, RewardType

        prev = make_table("3♣ 3♦ 9♠", "5♣")
        state = prev.with_move(0, detect(str_to_cards("3♣ 3♦")))
        calc = RewardCalculator(RewardConfig(reward_type=RewardType.SHAPED))

        assert calc.compute(state, prev, seat=0) == pytest.approx(0.02)
        assert calc.compute(state, prev, seat=1) == 0.0

    def test_compute_all(self):
        from env.reward import RewardCalculator

        state = make_table("3♣", "5♣ 6♣", "7♥").with_move(0, detect(str_to_cards("3♣")))
        rewards = RewardCalculator().compute_all(state)
        assert rewards == {0: 1.0, 1: -1.0, 2: -1.0}


class TestTienLenEnv:
    """TienLenEnv 测试"""

    def test_create(self):
        from env import TienLenEnv

        env = TienLenEnv()
        assert env is not None
        assert env.action_space.n == 256
        assert env.config.players == 4

    def test_invalid_config(self):
        from env import TienLenEnv
        from core.errors import InvalidConfiguration

        with pytest.raises(InvalidConfiguration):
            TienLenEnv(config=GameConfig(players=7))

    @pytest.mark.parametrize("agent_seat", [2, 3, -1])
    def test_invalid_agent_seat(self, agent_seat):
        from env import TienLenEnv
        from core.errors import InvalidConfiguration

        with pytest.raises(InvalidConfiguration):
            TienLenEnv(config=GameConfig(players=2), agent_seat=agent_seat)

    def test_last_agent_seat(self):
        from env import TienLenEnv

        env = TienLenEnv(config=GameConfig(players=2), agent_seat=1)
        obs, info = env.reset(seed=0)
        assert obs["hand"].sum() == 26

    def test_reset(self):
        from env import TienLenEnv

        env = TienLenEnv()
        obs, info = env.reset(seed=42)

        assert isinstance(obs, dict)
        assert "hand" in obs
        assert obs["hand"].sum() == 13
        assert env.observation_space.contains(obs)
        assert "current_player" in info
        assert "legal_actions" in info
        # 桌面清空时没有过牌选项
        assert info["legal_actions"][0] is not None
        assert len(info["legal_actions"]) > 0

    def test_reset_seeded(self):
        from env import TienLenEnv

        env1 = TienLenEnv()
        env2 = TienLenEnv()
        env1.reset(seed=7)
        env2.reset(seed=7)
        assert env1.state == env2.state

    def test_seed_from_config(self):
        from env import TienLenEnv

        env1 = TienLenEnv(config=GameConfig(seed=3))
        env2 = TienLenEnv(config=GameConfig(seed=3))
        env1.reset()
        env2.reset()
        assert env1.state.hands == env2.state.hands

    def test_step_before_reset(self):
        from env import TienLenEnv

        env = TienLenEnv()
        with pytest.raises(RuntimeError):
            env.step(0)

    def test_step_index(self):
        from env import TienLenEnv

        env = TienLenEnv()
        obs, info = env.reset(seed=42)
        seat = info["current_player"]
        action = info["legal_actions"][0]

        obs, reward, terminated, truncated, info = env.step(0)

        assert isinstance(reward, float)
        assert not terminated
        assert not truncated
        assert len(env.state.get_hand(seat)) == 13 - len(action)
        assert env.state.last_combo == action
        assert info["current_player"] == (seat + 1) % 4
        assert info["step_count"] == 1

    def test_following_has_pass(self):
        from env import TienLenEnv

        env = TienLenEnv()
        env.reset(seed=1)
        obs, reward, terminated, truncated, info = env.step(0)

        assert info["legal_actions"][0] is None
        obs, reward, terminated, truncated, info = env.step(0)
        assert info["passes_in_row"] == 1

    def test_step_cards(self):
        from env import TienLenEnv

        env = TienLenEnv()
        obs, info = env.reset(seed=5)
        seat = info["current_player"]
        card = env.state.get_hand(seat)[0]

        obs, reward, terminated, truncated, info = env.step([card])
        assert "error" not in info
        assert card not in env.state.get_hand(seat)

    def test_step_combo(self):
        from env import TienLenEnv

        env = TienLenEnv()
        obs, info = env.reset(seed=5)
        combo = info["legal_actions"][-1]
        assert isinstance(combo, Combo)

        obs, reward, terminated, truncated, info = env.step(combo)
        assert "error" not in info
        assert env.state.last_combo == combo

    def test_illegal_action(self):
        from env import TienLenEnv

        env = TienLenEnv()
        obs, info = env.reset(seed=5)
        seat = info["current_player"]
        other = env.state.get_hand((seat + 1) % 4)[0]
        before = env.state

        obs, reward, terminated, truncated, info = env.step([other])

        assert reward == -1.0
        assert not terminated
        assert info["error"] == "card not in hand"
        assert env.state is before

    def test_invalid_index(self):
        from env import TienLenEnv

        env = TienLenEnv()
        env.reset(seed=5)
        with pytest.raises(ValueError):
            env.step(255)

    def test_full_game_random(self):
        from env import TienLenEnv

        env = TienLenEnv(config=GameConfig(players=3))
        obs, info = env.reset(seed=42)

        done = False
        steps = 0
        while not done and steps < 5000:
            action = env.sample_action()
            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            steps += 1

        assert done
        assert "winner" in info
        assert len(env.state.get_hand(info["winner"])) == 0
        # 奖励属于刚行动的座位，即赢家
        assert reward == 1.0
        assert info["legal_actions"] == []

    def test_agent_seat_reward(self):
        from env import TienLenEnv

        env = TienLenEnv(config=GameConfig(players=2), agent_seat=0)
        obs, info = env.reset(seed=0)

        done = False
        while not done:
            obs, reward, terminated, truncated, info = env.step(0)
            done = terminated or truncated

        expected = 1.0 if info["winner"] == 0 else -1.0
        assert reward == expected

    def test_render_ansi(self):
        from env import TienLenEnv

        env = TienLenEnv(render_mode="ansi")
        env.reset(seed=0)
        text = env.render()
        assert "Current Player" in text

    def test_render_none(self):
        from env import TienLenEnv

        env = TienLenEnv()
        env.reset(seed=0)
        assert env.render() is None

    def test_make_env(self):
        from env import make_env, TienLenEnv

        env = make_env(config=GameConfig(players=2))
        assert isinstance(env, TienLenEnv)
        assert env.config.players == 2
