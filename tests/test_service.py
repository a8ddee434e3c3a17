from datetime import UTC, datetime
from pathlib import Path

from sdetcoach.config import SessionConfig
from sdetcoach.errors import SessionIOError, SessionStateError, UnclassifiedCategory
from sdetcoach.models import ConceptualFolder, CurriculumComplete, Topic
from sdetcoach.service import SessionController, SessionState, SessionStep


ALL_IDS = ("java-1.1-ac1", "git-1.1-ac1", "java-1.2-ac1", "playwright-2.1-ac1")


def _clock() -> datetime:
    return datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


def _controller(config: SessionConfig) -> SessionController:
    return SessionController(config, clock=_clock)


def test_state_machine_walks_one_topic(session_config: SessionConfig) -> None:
    controller = _controller(session_config)
    assert controller.state is SessionState.IDLE

    topic = controller.resolve()
    assert isinstance(topic, Topic)
    assert topic.id == "java-1.1-ac1"
    assert controller.state is SessionState.AWAITING_CLASSIFICATION

    controller.classify()
    assert controller.state is SessionState.MUTATING

    report = controller.mutate()
    assert controller.state is SessionState.AWAITING_LEARNER_WORK
    assert "java-automation-portfolio" in report.created

    entry = controller.confirm()
    assert entry.topic_id == "java-1.1-ac1"
    assert entry.completed_at == "2026-03-14T09:30:00+00:00"
    assert controller.state is SessionState.IDLE
    assert controller.topic is None

    ledger_text = session_config.ledger_path.read_text(encoding="utf-8")
    assert "- [x] java-1.1-ac1 | 2026-03-14T09:30:00+00:00 | Variables and types" in ledger_text


def test_step_returns_everything_for_the_learner(session_config: SessionConfig) -> None:
    lessons = session_config.lessons_dir
    lessons.mkdir()
    (lessons / "java-1.1-ac1.md").write_text("# Variables\n", encoding="utf-8")

    step = _controller(session_config).step()
    assert isinstance(step, SessionStep)
    assert step.topic.id == "java-1.1-ac1"
    assert step.has_lesson is True
    assert step.lesson_path == lessons / "java-1.1-ac1.md"


def test_next_session_picks_up_after_confirmation(session_config: SessionConfig) -> None:
    first = _controller(session_config)
    first.step()
    first.confirm()

    second = _controller(session_config)
    step = second.step()
    assert isinstance(step, SessionStep)
    assert step.topic.id == "git-1.1-ac1"
    assert step.strategy == ConceptualFolder("git-practice")
    assert step.has_lesson is False


def test_ledger_edits_between_resolves_are_seen(session_config: SessionConfig) -> None:
    controller = _controller(session_config)
    session_config.ledger_path.write_text("- [x] java-1.1-ac1: done by hand\n", encoding="utf-8")
    topic = controller.resolve()
    assert isinstance(topic, Topic)
    assert topic.id == "git-1.1-ac1"


def test_finished_curriculum_is_terminal(session_config: SessionConfig) -> None:
    session_config.ledger_path.write_text(
        "".join(f"- [x] {topic_id}: done\n" for topic_id in ALL_IDS),
        encoding="utf-8",
    )
    controller = _controller(session_config)
    assert controller.step() is CurriculumComplete
    assert controller.state is SessionState.DONE
    try:
        controller.resolve()
        raise AssertionError("Expected SessionStateError after DONE.")
    except SessionStateError as exc:
        assert exc.state == "done"


def test_operations_out_of_order_are_rejected(session_config: SessionConfig) -> None:
    controller = _controller(session_config)
    for operation in (controller.classify, controller.mutate, controller.confirm):
        try:
            operation()
            raise AssertionError("Expected SessionStateError from IDLE.")
        except SessionStateError as exc:
            assert exc.state == "idle"
    assert not session_config.ledger_path.exists()


def test_unclassified_category_resets_to_idle(tmp_path: Path, write_catalog) -> None:
    write_catalog([{"id": "astrology-1-ac1", "category": "astrology", "description": "Stars"}])
    controller = _controller(SessionConfig(home=tmp_path))
    try:
        controller.step()
        raise AssertionError("Expected UnclassifiedCategory.")
    except UnclassifiedCategory as exc:
        assert exc.category == "astrology"
    assert controller.state is SessionState.IDLE
    assert not (tmp_path / "my-portfolio").exists()


def test_custom_strategy_table(tmp_path: Path, write_catalog) -> None:
    write_catalog([{"id": "astrology-1-ac1", "category": "astrology", "description": "Stars"}])
    controller = SessionController(
        SessionConfig(home=tmp_path),
        strategies={"astrology": ConceptualFolder("star-charts")},
        clock=_clock,
    )
    step = controller.step()
    assert isinstance(step, SessionStep)
    assert step.report.created == ["star-charts"]
    assert (tmp_path / "my-portfolio" / "star-charts").is_dir()


def test_failed_append_keeps_awaiting_learner_work(session_config: SessionConfig, monkeypatch) -> None:
    controller = _controller(session_config)
    controller.step()

    def _fail(entry):
        raise SessionIOError("append to ledger", session_config.ledger_path, OSError(13, "Permission denied"))

    monkeypatch.setattr(controller.ledger_store, "append", _fail)
    try:
        controller.confirm()
        raise AssertionError("Expected SessionIOError.")
    except SessionIOError:
        pass
    assert controller.state is SessionState.AWAITING_LEARNER_WORK
    assert controller.topic is not None

    monkeypatch.undo()
    assert controller.confirm().topic_id == "java-1.1-ac1"


def test_status_rows_and_diagnostics(session_config: SessionConfig) -> None:
    session_config.ledger_path.write_text(
        "- [x] java-1.2-ac1: Collections\n- [x] retired-1-ac1: Old topic\n",
        encoding="utf-8",
    )
    controller = _controller(session_config)
    rows = controller.status()
    assert [(row.topic.id, row.completed, row.is_next) for row in rows] == [
        ("java-1.1-ac1", False, True),
        ("git-1.1-ac1", False, False),
        ("java-1.2-ac1", True, False),
        ("playwright-2.1-ac1", False, False),
    ]
    summary = controller.summary()
    assert (summary.completed, summary.total) == (1, 4)
    assert controller.stale_topic_ids() == ["retired-1-ac1"]
    assert controller.out_of_order_ids() == ["java-1.2-ac1"]
