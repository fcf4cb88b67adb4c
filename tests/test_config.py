import pytest

from doorway import create_app
from doorway.mapgen import ConfigError, GeneratorConfig, coerce_seed
from doorway.mapgen.config import SEED_MAX_INT


def test_defaults():
    cfg = GeneratorConfig()
    assert (cfg.max_rooms, cfg.iteration_budget, cfg.max_bound_span, cfg.min_path_length) == (25, 20000, 7, 6)
    assert cfg.attempts == 3
    assert cfg.restore_bounds_on_backtrack is True
    assert cfg.validate() is cfg


@pytest.mark.parametrize(
    "field,value",
    [("max_rooms", 0), ("max_rooms", 501), ("iteration_budget", 0), ("max_bound_span", -1),
     ("min_path_length", -2), ("attempts", 0)],
)
def test_validate_rejects(field, value):
    with pytest.raises(ConfigError) as exc:
        GeneratorConfig(**{field: value}).validate()
    assert exc.value.field == field


def test_replace_ignores_none():
    cfg = GeneratorConfig(max_rooms=10).replace(max_rooms=None, min_path_length=3)
    assert cfg.max_rooms == 10
    assert cfg.min_path_length == 3


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MAPGEN_MAX_ROOMS", "12")
    monkeypatch.setenv("MAPGEN_ENABLE_METRICS", "0")
    monkeypatch.setenv("MAPGEN_SEED", "alpha")
    cfg = GeneratorConfig.from_env()
    assert cfg.max_rooms == 12
    assert cfg.enable_metrics is False
    assert cfg.seed == coerce_seed("alpha")


def test_env_bad_integer(monkeypatch):
    monkeypatch.setenv("MAPGEN_ITERATION_BUDGET", "lots")
    with pytest.raises(ConfigError):
        GeneratorConfig.from_env()


def test_app_config_takes_precedence(monkeypatch):
    monkeypatch.setenv("MAPGEN_MAX_ROOMS", "12")
    monkeypatch.setenv("MAPGEN_MIN_PATH_LENGTH", "4")
    app = create_app({"TESTING": True, "MAPGEN_MAX_ROOMS": 9})
    with app.app_context():
        cfg = GeneratorConfig.from_app_config()
    assert cfg.max_rooms == 9
    assert cfg.min_path_length == 4


def test_app_config_ignored_outside_context(monkeypatch):
    monkeypatch.setenv("MAPGEN_MAX_ROOMS", "12")
    assert GeneratorConfig.from_app_config().max_rooms == 12


def test_coerce_seed():
    assert coerce_seed(12345) == 12345
    assert coerce_seed("777") == 777
    assert coerce_seed(SEED_MAX_INT + 5) == 5
    assert coerce_seed("alpha") == coerce_seed(" alpha ")
    assert coerce_seed("alpha") != coerce_seed("beta")
    assert 0 <= coerce_seed("alpha") < SEED_MAX_INT
    assert isinstance(coerce_seed(None), int)
    assert isinstance(coerce_seed(""), int)
    with pytest.raises(ConfigError):
        coerce_seed(True)
    with pytest.raises(ConfigError):
        coerce_seed(1.5)
