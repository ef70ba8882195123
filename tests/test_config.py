import pytest

from tttboard.config import GameConfig, default_seed, default_think_delay


def test_defaults_without_env(monkeypatch):
    monkeypatch.delenv("TTTBOARD_THINK_DELAY", raising=False)
    monkeypatch.delenv("TTTBOARD_SEED", raising=False)
    cfg = GameConfig.from_env()
    assert cfg.think_delay == 0.0
    assert cfg.seed is None
    assert cfg.player_seeds() == (None, None)
    assert (cfg.x_kind, cfg.o_kind) == ("human", "optimal")


def test_env_then_overrides(monkeypatch):
    monkeypatch.setenv("TTTBOARD_THINK_DELAY", "0.5")
    monkeypatch.setenv("TTTBOARD_SEED", "7")
    assert default_think_delay() == 0.5
    assert default_seed() == 7
    cfg = GameConfig.from_env(seed=None, think_delay=0.0, x_kind="random")
    assert cfg.seed == 7
    assert cfg.think_delay == 0.0
    assert cfg.x_kind == "random"
    assert cfg.player_seeds() == (7, 8)


@pytest.mark.parametrize("name,value", [
    ("TTTBOARD_THINK_DELAY", "soon"),
    ("TTTBOARD_THINK_DELAY", "-1"),
    ("TTTBOARD_SEED", "1.5"),
])
def test_bad_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        GameConfig.from_env()


def test_unknown_override():
    with pytest.raises(TypeError):
        GameConfig.from_env(colour="red")
