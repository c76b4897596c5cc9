"""Tests for the ecosystem scanners with canned tool output."""

import json
from datetime import datetime, timezone

import pytest

from faro.common.process import CommandResult
from faro.errors import FilterCompileError, ManifestReadError, ScanError
from faro.models import DependencyInfo, ScanOptions
from faro.scanner.gomod import GoScanner, iter_json_stream
from faro.scanner.npm import NpmScanner
from faro.scanner.pip import PipScanner
from faro.scanner.pnpm import PnpmScanner
from faro.scanner.poetry import PoetryScanner, parse_show_line
from faro.scanner.uv import UvScanner
from faro.scanner.yarn import YarnScanner

NOW = datetime(2026, 1, 17, tzinfo=timezone.utc)

GO_MOD = """module example.com/app

require (
\tgithub.com/direct/one v1.0.0
\tgithub.com/indirect/two v1.0.0 // indirect
)
"""

GO_LIST = "\n".join(
    json.dumps(entry, indent=2)
    for entry in [
        {"Path": "example.com/app", "Main": True},
        {
            "Path": "github.com/direct/one",
            "Version": "v1.0.0",
            "Update": {"Path": "github.com/direct/one", "Version": "v1.2.0", "Time": "2025-12-01T00:00:00Z"},
        },
        {
            "Path": "github.com/indirect/two",
            "Version": "v1.0.0",
            "Update": {"Path": "github.com/indirect/two", "Version": "v1.0.1", "Time": "2026-01-10T00:00:00Z"},
        },
        {
            "Path": "github.com/deep/three",
            "Version": "v0.1.0",
            "Update": {"Path": "github.com/deep/three", "Version": "v0.2.0"},
        },
        {"Path": "github.com/current/four", "Version": "v2.0.0"},
    ]
)


def _names(modules):
    return [m.name for m in modules]


class TestGoScanner:
    """go list -m -u -json all."""

    @pytest.fixture
    def scanner(self, tmp_path, fake_runner):
        (tmp_path / "go.mod").write_text(GO_MOD)
        runner = fake_runner({"go list": CommandResult(0, GO_LIST)})
        return GoScanner(str(tmp_path), runner=runner, clock=lambda: NOW)

    def test_default_hides_transitive(self, scanner):
        modules = scanner.get_updates(ScanOptions())
        assert _names(modules) == ["github.com/direct/one", "github.com/indirect/two"]
        assert modules[0].direct is True and modules[0].dependency_type == "direct"
        assert modules[1].direct is False and modules[1].dependency_type == "indirect"
        assert modules[0].update.time == "2025-12-01T00:00:00Z"

    def test_include_all(self, scanner):
        modules = scanner.get_updates(ScanOptions(include_all=True))
        assert modules[-1].name == "github.com/deep/three"
        assert modules[-1].dependency_type == "transitive"

    def test_cooldown(self, scanner):
        modules = scanner.get_updates(ScanOptions(cooldown_days=14))
        assert _names(modules) == ["github.com/direct/one"]

    def test_regex_filter(self, scanner):
        assert _names(scanner.get_updates(ScanOptions(filter="^github.com/ind"))) == ["github.com/indirect/two"]

    def test_invalid_regex_is_fatal(self, scanner):
        with pytest.raises(FilterCompileError):
            scanner.get_updates(ScanOptions(filter="(oops"))

    def test_dependency_index(self, scanner):
        assert scanner.get_dependency_index() == {
            "github.com/direct/one": DependencyInfo(True, "direct"),
            "github.com/indirect/two": DependencyInfo(False, "indirect"),
        }

    def test_command_failure(self, tmp_path, fake_runner):
        runner = fake_runner({"go list": CommandResult(1, "", "go: no go.mod")})
        with pytest.raises(ScanError) as exc:
            GoScanner(str(tmp_path), runner=runner).get_updates(ScanOptions())
        assert "no go.mod" in str(exc.value)

    def test_bad_json_stream(self):
        with pytest.raises(ScanError):
            list(iter_json_stream('{"Path": "a"} {broken'))


class TestNpmScanner:
    """npm outdated --json."""

    OUTDATED = json.dumps({
        "react": {"current": "18.2.0", "wanted": "18.3.1", "latest": "19.0.0"},
        "jest": {"current": "29.0.0", "wanted": "29.7.0", "latest": "29.7.0"},
        "left-pad": {"current": "1.0.0", "wanted": "1.3.0", "latest": "1.3.0"},
        "same": {"current": "1.0.0", "wanted": "1.0.0", "latest": "1.0.0"},
    })

    @pytest.fixture
    def project(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({
            "dependencies": {"react": "^18.2.0"},
            "devDependencies": {"jest": "^29.0.0"},
        }))
        return tmp_path

    def test_exit_one_with_json_is_success(self, project, fake_runner):
        runner = fake_runner({"npm outdated": CommandResult(1, self.OUTDATED)})
        modules = NpmScanner(str(project), runner=runner).get_updates(ScanOptions())
        assert _names(modules) == ["react"]
        assert modules[0].update.version == "19.0.0"

    def test_include_all_sorted(self, project, fake_runner):
        runner = fake_runner({"npm outdated": CommandResult(1, self.OUTDATED)})
        modules = NpmScanner(str(project), runner=runner).get_updates(ScanOptions(include_all=True))
        assert _names(modules) == ["jest", "left-pad", "react"]
        assert modules[0].dependency_type == "devDependencies"
        assert modules[1].direct is False

    def test_empty_output(self, project, fake_runner):
        runner = fake_runner({"npm outdated": CommandResult(0, "")})
        assert NpmScanner(str(project), runner=runner).get_updates(ScanOptions()) == []

    def test_unexpected_exit_code(self, project, fake_runner):
        runner = fake_runner({"npm outdated": CommandResult(2, "", "boom")})
        with pytest.raises(ScanError):
            NpmScanner(str(project), runner=runner).get_updates(ScanOptions())

    def test_index(self, project):
        index = NpmScanner(str(project)).get_dependency_index()
        assert index["react"] == DependencyInfo(True, "dependencies")
        assert index["jest"] == DependencyInfo(True, "devDependencies")

    def test_invalid_package_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{")
        with pytest.raises(ManifestReadError):
            NpmScanner(str(tmp_path)).get_dependency_index()

    def test_missing_package_json_is_empty_index(self, tmp_path):
        assert NpmScanner(str(tmp_path)).get_dependency_index() == {}


class TestYarnScanner:
    """yarn outdated --json NDJSON."""

    OUTPUT = "\n".join([
        json.dumps({"type": "info", "data": "Color legend"}),
        json.dumps({"type": "table", "data": {
            "head": ["Package", "Current", "Wanted", "Latest", "Package Type", "URL"],
            "body": [
                ["lodash", "4.17.20", "4.17.21", "4.17.21", "dependencies", ""],
                ["eslint", "8.0.0", "8.57.0", "9.0.0", "devDependencies", ""],
                ["short", "1.0.0"],
            ],
        }}),
        "not json",
    ])

    def test_rows(self, tmp_path, fake_runner):
        (tmp_path / "package.json").write_text('{"dependencies": {"lodash": "^4"}, "devDependencies": {"eslint": "^8"}}')
        runner = fake_runner({"yarn outdated": CommandResult(1, self.OUTPUT)})
        scanner = YarnScanner(str(tmp_path), runner=runner)
        assert _names(scanner.get_updates(ScanOptions())) == ["lodash"]
        all_modules = scanner.get_updates(ScanOptions(include_all=True))
        assert _names(all_modules) == ["lodash", "eslint"]
        assert all_modules[1].update.version == "9.0.0"


class TestPnpmScanner:
    """pnpm outdated --format json, both shapes."""

    def test_mapping_shape(self, tmp_path, fake_runner):
        (tmp_path / "package.json").write_text('{"dependencies": {"vue": "^3"}}')
        output = json.dumps({
            "vue": {"current": "3.3.0", "latest": "3.4.0", "wanted": "3.4.0"},
            "typescript": {"current": "5.0.0", "latest": "5.4.0", "dependencyType": "devDependencies"},
        })
        runner = fake_runner({"pnpm outdated": CommandResult(1, output)})
        scanner = PnpmScanner(str(tmp_path), runner=runner)
        assert _names(scanner.get_updates(ScanOptions())) == ["vue"]
        assert _names(scanner.get_updates(ScanOptions(include_all=True))) == ["typescript", "vue"]

    def test_list_shape_and_filter(self, tmp_path, fake_runner):
        (tmp_path / "package.json").write_text('{"dependencies": {"react": "^18", "react-dom": "^18", "vue": "^3"}}')
        output = json.dumps([
            {"name": "react", "current": "18.0.0", "latest": "18.3.0", "packageType": "dependencies"},
            {"name": "react-dom", "current": "18.0.0", "latest": "18.3.0", "packageType": "dependencies"},
            {"name": "vue", "current": "3.0.0", "latest": "3.4.0", "packageType": "dependencies"},
        ])
        runner = fake_runner({"pnpm outdated": CommandResult(0, output)})
        modules = PnpmScanner(str(tmp_path), runner=runner).get_updates(ScanOptions(filter="react"))
        assert _names(modules) == ["react", "react-dom"]


class TestPipScanner:
    """pip list --outdated --format json."""

    OUTPUT = json.dumps([
        {"name": "Flask", "version": "2.0.0", "latest_version": "3.0.0", "latest_filetype": "wheel"},
        {"name": "Werkzeug", "version": "2.0.0", "latest_version": "3.0.1", "latest_filetype": "wheel"},
    ])

    def test_direct_only_by_default(self, tmp_path, fake_runner):
        (tmp_path / "requirements.txt").write_text("flask==2.0.0\n")
        runner = fake_runner({"pip list": CommandResult(0, self.OUTPUT)})
        scanner = PipScanner(str(tmp_path), runner=runner)
        modules = scanner.get_updates(ScanOptions())
        assert _names(modules) == ["flask"]
        assert modules[0].dependency_type == "main"
        assert _names(scanner.get_updates(ScanOptions(include_all=True))) == ["flask", "werkzeug"]

    def test_case_insensitive_filter(self, tmp_path, fake_runner):
        (tmp_path / "requirements.txt").write_text("flask\nwerkzeug\n")
        runner = fake_runner({"pip list": CommandResult(0, self.OUTPUT)})
        modules = PipScanner(str(tmp_path), runner=runner).get_updates(ScanOptions(filter="WERK"))
        assert _names(modules) == ["werkzeug"]

    def test_missing_requirements_is_empty_index(self, tmp_path):
        assert PipScanner(str(tmp_path)).get_dependency_index() == {}


class TestPoetryScanner:
    """poetry show --outdated text output."""

    OUTPUT = (
        "requests           2.28.0 2.31.0 Python HTTP for Humans.\n"
        "pytest         (!) 7.0.0  8.1.0  pytest: simple powerful testing\n"
        "urllib3            1.26.0 2.2.0  HTTP library\n"
    )

    @pytest.fixture
    def project(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            '[tool.poetry.dependencies]\npython = "^3.11"\nrequests = "^2.28"\n'
            '[tool.poetry.group.dev.dependencies]\npytest = "^7"\n'
        )
        return tmp_path

    def test_parse_line_skips_marker(self):
        assert parse_show_line("pytest (!) 7.0.0 8.1.0 desc") == ("pytest", "7.0.0", "8.1.0")
        assert parse_show_line("garbage") is None

    def test_categories(self, project, fake_runner):
        runner = fake_runner({"poetry show": CommandResult(0, self.OUTPUT)})
        scanner = PoetryScanner(str(project), runner=runner)
        assert _names(scanner.get_updates(ScanOptions())) == ["requests"]
        modules = scanner.get_updates(ScanOptions(include_all=True))
        assert _names(modules) == ["requests", "pytest", "urllib3"]
        assert [m.dependency_type for m in modules] == ["main", "dev", "transitive"]

    def test_case_sensitive_filter(self, project, fake_runner):
        runner = fake_runner({"poetry show": CommandResult(0, self.OUTPUT)})
        scanner = PoetryScanner(str(project), runner=runner)
        assert _names(scanner.get_updates(ScanOptions(filter="quest"))) == ["requests"]
        assert scanner.get_updates(ScanOptions(filter="Requests")) == []

    def test_failure_means_no_updates(self, project, fake_runner):
        runner = fake_runner({"poetry show": CommandResult(1, "", "poetry.lock not found")})
        assert PoetryScanner(str(project), runner=runner).get_updates(ScanOptions()) == []


class TestUvScanner:
    """uv pip list --outdated --format json."""

    OUTPUT = json.dumps([
        {"name": "httpx", "version": "0.26.0", "latest_version": "0.27.0", "latest_filetype": "wheel"},
        {"name": "anyio", "version": "3.0.0", "latest_version": "4.3.0", "latest_filetype": "wheel"},
    ])

    def test_everything_is_direct_main(self, tmp_path, fake_runner):
        runner = fake_runner({"uv pip list --outdated": CommandResult(0, self.OUTPUT)})
        modules = UvScanner(str(tmp_path), runner=runner).get_updates(ScanOptions())
        assert _names(modules) == ["anyio", "httpx"]
        assert all(m.direct and m.dependency_type == "main" for m in modules)

    def test_index_from_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\ndependencies = ["httpx"]\n')
        assert UvScanner(str(tmp_path)).get_dependency_index() == {"httpx": DependencyInfo(True, "main")}

    def test_index_falls_back_to_installed(self, tmp_path, fake_runner):
        runner = fake_runner({"uv pip list --format": CommandResult(0, '[{"name": "Rich", "version": "13.0.0"}]')})
        assert UvScanner(str(tmp_path), runner=runner).get_dependency_index() == {
            "rich": DependencyInfo(True, "main")
        }
