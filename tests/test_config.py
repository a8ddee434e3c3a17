from pathlib import Path

from sdetcoach.config import SessionConfig


def test_defaults_derive_from_home() -> None:
    config = SessionConfig(home=Path("/srv/learner"))
    assert config.catalog_path == Path("/srv/learner/requirements.json")
    assert config.ledger_path == Path("/srv/learner/progress.md")
    assert config.lessons_dir == Path("/srv/learner/sdet-learning-content")
    assert config.workspace_root == Path("/srv/learner/my-portfolio")
    assert config.log_level == "WARNING"


def test_from_env_reads_variables() -> None:
    env = {
        "SDETCOACH_HOME": "/data",
        "SDETCOACH_LEDGER": "/elsewhere/ledger.md",
        "SDETCOACH_LOG_LEVEL": "debug",
        "SDETCOACH_WORKSPACE": "  ",
    }
    config = SessionConfig.from_env(env)
    assert config.home == Path("/data")
    assert config.catalog_path == Path("/data/requirements.json")
    assert config.ledger_path == Path("/elsewhere/ledger.md")
    assert config.workspace_root == Path("/data/my-portfolio")
    assert config.log_level == "DEBUG"


def test_overrides_beat_environment() -> None:
    env = {"SDETCOACH_HOME": "/data", "SDETCOACH_CATALOG": "/data/a.json"}
    config = SessionConfig.from_env(env, catalog_path="/tmp/b.yaml", lessons_dir=None)
    assert config.catalog_path == Path("/tmp/b.yaml")
    assert config.lessons_dir == Path("/data/sdet-learning-content")


def test_to_dict_is_json_friendly() -> None:
    config = SessionConfig(home=Path("home"))
    assert config.to_dict() == {
        "home": "home",
        "catalog": str(Path("home") / "requirements.json"),
        "ledger": str(Path("home") / "progress.md"),
        "lessons": str(Path("home") / "sdet-learning-content"),
        "workspace": str(Path("home") / "my-portfolio"),
        "log_level": "WARNING",
    }
