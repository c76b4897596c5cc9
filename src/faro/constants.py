"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2
    UPDATE_ERROR = 4
    INTERRUPTED = 130


class PackageManager(Enum):
    """Package managers supported by the program.

    Args:
        Enum (string): Package managers supported by the program.
    """

    GO = "go"
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    PIP = "pip"
    POETRY = "poetry"
    UV = "uv"

    def __str__(self) -> str:
        return self.value


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SUPPORTED_MANAGERS = [pm.value for pm in PackageManager]
    FORMAT_OPTIONS = ["group", "lines", "time"]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    GO_MOD_FILE = "go.mod"
    GO_SUM_FILE = "go.sum"
    PACKAGE_JSON_FILE = "package.json"
    PACKAGE_LOCK_FILE = "package-lock.json"
    YARN_LOCK_FILE = "yarn.lock"
    PNPM_LOCK_FILE = "pnpm-lock.yaml"
    REQUIREMENTS_FILE = "requirements.txt"
    PYPROJECT_TOML_FILE = "pyproject.toml"
    POETRY_LOCK_FILE = "poetry.lock"
    UV_LOCK_FILE = "uv.lock"

    CONFIG_FILE_NAMES = [".faro.yml", ".faro.yaml", "faro.yml"]
    USER_CONFIG_RELPATH = "faro/config.yml"
    ENV_LOG_LEVEL = "FARO_LOG_LEVEL"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

    OSV_QUERY_URL = "https://api.osv.dev/v1/query"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    DEFAULT_DIRECT_LABEL = "Direct dependencies"
    DEFAULT_INDIRECT_LABEL = "Indirect dependencies"
    DEFAULT_TRANSITIVE_LABEL = "Transitive"

    MSG_UP_TO_DATE = "All dependencies match the latest package versions :)"
    MSG_HINT = "Run with -u to upgrade, or -i for interactive mode."
