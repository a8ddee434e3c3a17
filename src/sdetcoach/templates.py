"""File content for project skeletons and per-topic practice stubs."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from string import Template

from .models import ProjectKind, Topic

JAVA_BASE_PACKAGE = "com.sdet.portfolio"
JAVA_SOURCE_ROOTS = ("src/main/java/", "src/test/java/")

_POM_XML = Template("""\
<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0"
         xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
         xsi:schemaLocation="http://maven.apache.org/POM/4.0.0 http://maven.apache.org/xsd/maven-4.0.0.xsd">
    <modelVersion>4.0.0</modelVersion>

    <groupId>com.sdet</groupId>
    <artifactId>$project_name</artifactId>
    <version>1.0-SNAPSHOT</version>

    <properties>
        <maven.compiler.source>17</maven.compiler.source>
        <maven.compiler.target>17</maven.compiler.target>
        <project.build.sourceEncoding>UTF-8</project.build.sourceEncoding>
    </properties>

    <dependencies>
        <dependency>
            <groupId>org.seleniumhq.selenium</groupId>
            <artifactId>selenium-java</artifactId>
            <version>4.21.0</version>
        </dependency>
        <dependency>
            <groupId>io.rest-assured</groupId>
            <artifactId>rest-assured</artifactId>
            <version>5.4.0</version>
        </dependency>
        <dependency>
            <groupId>org.testng</groupId>
            <artifactId>testng</artifactId>
            <version>7.10.2</version>
        </dependency>
    </dependencies>

    <build>
        <plugins>
            <plugin>
                <groupId>org.apache.maven.plugins</groupId>
                <artifactId>maven-surefire-plugin</artifactId>
                <version>3.2.5</version>
                <configuration>
                    <suiteXmlFiles>
                        <suiteXmlFile>testng.xml</suiteXmlFile>
                    </suiteXmlFiles>
                </configuration>
            </plugin>
        </plugins>
    </build>
</project>
""")

_TESTNG_XML = Template("""\
<!DOCTYPE suite SYSTEM "https://testng.org/testng-1.0.dtd">
<suite name="$project_name">
    <test name="all">
        <packages>
            <package name="$base_package.*"/>
        </packages>
    </test>
</suite>
""")

_BASE_TEST = Template("""\
package $base_package;

import org.testng.annotations.AfterMethod;
import org.testng.annotations.BeforeMethod;

/**
 * Shared setup and teardown for every test in the portfolio.
 */
public abstract class BaseTest {

    @BeforeMethod
    public void setUp() {
    }

    @AfterMethod
    public void tearDown() {
    }
}
""")

_CONFIG_PROPERTIES = """\
base.url=https://example.com
browser=chrome
timeout.seconds=30
"""

_PACKAGE_JSON = Template("""\
{
  "name": "$project_name",
  "version": "1.0.0",
  "private": true,
  "scripts": {
    "test": "playwright test",
    "report": "playwright show-report"
  },
  "devDependencies": {
    "@playwright/test": "^1.44.0",
    "@types/node": "^20.12.0",
    "typescript": "^5.4.0"
  }
}
""")

_TSCONFIG_JSON = """\
{
  "compilerOptions": {
    "target": "ES2022",
    "module": "commonjs",
    "strict": true,
    "esModuleInterop": true,
    "outDir": "dist"
  },
  "include": ["tests/**/*.ts", "playwright.config.ts"]
}
"""

_PLAYWRIGHT_CONFIG = """\
import { defineConfig, devices } from '@playwright/test';

export default defineConfig({
  testDir: './tests',
  retries: 0,
  reporter: 'html',
  use: {
    baseURL: 'https://example.com',
    trace: 'on-first-retry',
  },
  projects: [{ name: 'chromium', use: { ...devices['Desktop Chrome'] } }],
});
"""

_EXAMPLE_SPEC = """\
import { test, expect } from '@playwright/test';

test('home page has a title', async ({ page }) => {
  await page.goto('/');
  await expect(page).toHaveTitle(/.+/);
});
"""

_README = Template("""\
# $project_name

Practice project for the $track track. Files are added topic by topic;
anything you write here is never overwritten.
""")

_JAVA_GITIGNORE = "target/\n.idea/\n*.iml\n.DS_Store\n"
_NODE_GITIGNORE = "node_modules/\ntest-results/\nplaywright-report/\ndist/\n"

_JAVA_STUB = Template("""\
${package_line}/**
 * $heading
 *
 * Your Task:
$tasks
 */
public class $class_name {
}
""")

_TS_TEST_STUB = Template("""\
import { test } from '@playwright/test';

/**
 * $heading
 *
 * Your Task:
$tasks
 */
test.fixme('$title', async ({ page }) => {
});
""")

_TS_MODULE_STUB = Template("""\
/**
 * $heading
 *
 * Your Task:
$tasks
 */
export {};
""")

_TASK_SHEET = Template("""\
$heading

Your Task:
$tasks
""")


PROJECT_MANIFESTS = {ProjectKind.PRIMARY: "pom.xml", ProjectKind.SECONDARY: "package.json"}


def skeleton_files(kind: ProjectKind, project_name: str) -> dict[str, str]:
    """Return the first-time skeleton for a project kind, keyed by relative path.

    The manifest comes last: a project counts as scaffolded once it exists.
    """
    if kind is ProjectKind.PRIMARY:
        return {
            "testng.xml": _TESTNG_XML.substitute(project_name=project_name, base_package=JAVA_BASE_PACKAGE),
            ".gitignore": _JAVA_GITIGNORE,
            "README.md": _README.substitute(project_name=project_name, track="Java / Selenium / REST Assured"),
            "src/main/resources/config.properties": _CONFIG_PROPERTIES,
            "src/test/java/com/sdet/portfolio/BaseTest.java": _BASE_TEST.substitute(base_package=JAVA_BASE_PACKAGE),
            "pom.xml": _POM_XML.substitute(project_name=project_name),
        }
    return {
        "tsconfig.json": _TSCONFIG_JSON,
        "playwright.config.ts": _PLAYWRIGHT_CONFIG,
        ".gitignore": _NODE_GITIGNORE,
        "README.md": _README.substitute(project_name=project_name, track="Playwright / TypeScript"),
        "tests/example.spec.ts": _EXAMPLE_SPEC,
        "package.json": _PACKAGE_JSON.substitute(project_name=project_name),
    }


def topic_files(kind: ProjectKind, topic: Topic) -> dict[str, str]:
    """Return the files a topic adds to its project, keyed by relative path."""
    paths = list(topic.files) if topic.files else [default_topic_path(kind, topic)]
    return {path: _stub_for_path(path, topic) for path in paths}


def default_topic_path(kind: ProjectKind, topic: Topic) -> str:
    """Return the stub path used when a topic does not list its own files."""
    if kind is ProjectKind.PRIMARY:
        package_dir = JAVA_BASE_PACKAGE.replace(".", "/")
        return f"src/main/java/{package_dir}/{java_package_segment(topic.category)}/{java_class_name(topic.id)}.java"
    return f"tests/{topic.category}/{topic.id}.spec.ts"


def java_package_segment(category: str) -> str:
    """Turn a category into a legal lower-case Java package segment."""
    segment = re.sub(r"[^a-z0-9]", "", category.lower())
    if not segment or segment[0].isdigit():
        segment = f"topic{segment}"
    return segment


def java_class_name(value: str) -> str:
    """Turn an id or file stem into a PascalCase Java class name."""
    parts = [part for part in re.split(r"[^0-9A-Za-z]+", value) if part]
    name = "".join(part[0].upper() + part[1:] for part in parts)
    if not name or name[0].isdigit():
        name = f"Topic{name}"
    return name


def _stub_for_path(path: str, topic: Topic) -> str:
    pure = PurePosixPath(path)
    heading = _comment_safe(f"{topic.id}: {topic.description}" if topic.description else topic.id)
    if pure.suffix == ".java":
        return _JAVA_STUB.substitute(
            package_line=_java_package_line(path),
            heading=heading,
            tasks=_task_lines(topic, prefix=" * "),
            class_name=java_class_name(pure.stem),
        )
    if pure.suffix == ".ts":
        tasks = _task_lines(topic, prefix=" * ")
        if pure.name.endswith((".spec.ts", ".test.ts")):
            return _TS_TEST_STUB.substitute(heading=heading, tasks=tasks, title=_ts_string(topic.id))
        return _TS_MODULE_STUB.substitute(heading=heading, tasks=tasks)
    return _TASK_SHEET.substitute(heading=heading, tasks=_task_lines(topic, prefix=""))


def _java_package_line(path: str) -> str:
    for root in JAVA_SOURCE_ROOTS:
        if path.startswith(root):
            package_parts = PurePosixPath(path[len(root) :]).parent.parts
            if package_parts:
                return f"package {'.'.join(package_parts)};\n\n"
    return ""


def _task_lines(topic: Topic, *, prefix: str) -> str:
    if not topic.steps:
        return f"{prefix}1. Work through the lesson for {topic.id}."
    return "\n".join(f"{prefix}{number}. {_comment_safe(step)}" for number, step in enumerate(topic.steps, start=1))


def _comment_safe(text: str) -> str:
    return " ".join(text.split()).replace("*/", "* /")


def _ts_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("'", "\\'")
