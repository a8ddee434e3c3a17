from sdetcoach.errors import UnclassifiedCategory
from sdetcoach.models import ConceptualFolder, ConsolidatedProject, ProjectKind, Topic
from sdetcoach.strategies import PRIMARY_PROJECT, SECONDARY_PROJECT, STRATEGY_TABLE, classify, describe_strategy
from sdetcoach.templates import default_topic_path, java_class_name, java_package_segment, skeleton_files, topic_files


def _topic(category: str, topic_id: str = "x-1-ac1", **kwargs) -> Topic:
    return Topic(id=topic_id, category=category, description=kwargs.pop("description", "Demo"), **kwargs)


def test_classify_known_categories() -> None:
    assert classify(_topic("selenium")) == PRIMARY_PROJECT
    assert classify(_topic("rest-assured")) is PRIMARY_PROJECT
    assert classify(_topic("playwright")) is SECONDARY_PROJECT
    assert classify(_topic("git")) == ConceptualFolder("git-practice")


def test_classify_unknown_category_has_no_fallback() -> None:
    try:
        classify(_topic("astrology", topic_id="astrology-1-ac1"))
        raise AssertionError("Expected UnclassifiedCategory.")
    except UnclassifiedCategory as exc:
        assert exc.category == "astrology"
        assert exc.topic_id == "astrology-1-ac1"
        assert "astrology" in str(exc)


def test_strategy_table_is_read_only() -> None:
    try:
        STRATEGY_TABLE["new"] = ConceptualFolder("new")  # type: ignore[index]
        raise AssertionError("Expected TypeError when mutating the strategy table.")
    except TypeError:
        pass


def test_custom_table_overrides_default() -> None:
    table = {"astrology": ConceptualFolder("stars")}
    assert classify(_topic("astrology"), table) == ConceptualFolder("stars")


def test_every_strategy_is_a_known_variant() -> None:
    for strategy in STRATEGY_TABLE.values():
        assert isinstance(strategy, (ConsolidatedProject, ConceptualFolder))


def test_describe_strategy() -> None:
    assert describe_strategy(PRIMARY_PROJECT) == "primary-language-project 'java-automation-portfolio'"
    assert describe_strategy(ConceptualFolder("sql-practice")) == "conceptual folder 'sql-practice'"


def test_java_names() -> None:
    assert java_class_name("java-1.2-ac2") == "Java12Ac2"
    assert java_class_name("1-intro") == "Topic1Intro"
    assert java_package_segment("rest-assured") == "restassured"
    assert java_package_segment("3d") == "topic3d"


def test_default_topic_paths() -> None:
    topic = _topic("rest-assured", topic_id="rest-assured-2.1-ac1")
    assert default_topic_path(ProjectKind.PRIMARY, topic) == (
        "src/main/java/com/sdet/portfolio/restassured/RestAssured21Ac1.java"
    )
    secondary = _topic("playwright", "pw-1-ac1")
    assert default_topic_path(ProjectKind.SECONDARY, secondary) == "tests/playwright/pw-1-ac1.spec.ts"


def test_java_stub_content() -> None:
    topic = _topic("java", "java-1.2-ac1", description="Collections */ demo", steps=("Create a List", "Sort it"))
    files = topic_files(ProjectKind.PRIMARY, topic)
    [(path, content)] = list(files.items())
    assert path.endswith("/java/Java12Ac1.java")
    assert content.startswith("package com.sdet.portfolio.java;\n\n/**\n")
    assert " * java-1.2-ac1: Collections * / demo" in content
    assert " * 1. Create a List\n * 2. Sort it" in content
    assert "public class Java12Ac1 {" in content


def test_stub_kinds_follow_file_suffix() -> None:
    topic = _topic(
        "playwright",
        "pw-1-ac1",
        files=("tests/login.spec.ts", "pages/LoginPage.ts", "notes.md"),
    )
    files = topic_files(ProjectKind.SECONDARY, topic)
    assert "test.fixme('pw-1-ac1'" in files["tests/login.spec.ts"]
    assert files["pages/LoginPage.ts"].rstrip().endswith("export {};")
    assert files["notes.md"].startswith("pw-1-ac1: Demo\n\nYour Task:\n1. Work through the lesson for pw-1-ac1.")


def test_skeletons_name_the_project() -> None:
    primary = skeleton_files(ProjectKind.PRIMARY, "java-automation-portfolio")
    assert "<artifactId>java-automation-portfolio</artifactId>" in primary["pom.xml"]
    assert "src/test/java/com/sdet/portfolio/BaseTest.java" in primary
    secondary = skeleton_files(ProjectKind.SECONDARY, "playwright-automation-portfolio")
    assert '"name": "playwright-automation-portfolio"' in secondary["package.json"]
    assert "playwright.config.ts" in secondary
