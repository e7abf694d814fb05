"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INPUT_ERROR = 3
    TOOLCHAIN_ERROR = 4


class Commands(Enum):
    """Sub-commands supported by the program.

    Args:
        Enum (string): Sub-command names.
    """

    GET = "get"
    LIST = "list"
    PATH = "path"
    HELP = "help"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROXY_URL = "https://proxy.golang.org"
    PRIVATE_PATTERNS = ""
    GO_MOD_FILE = "go.mod"
    GO_BINARY = "go"
    GO_SOURCE_SUFFIX = ".go"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    # Path conventions
    LEGACY_HOST_PREFIX = "gopkg.in/"
    INCOMPATIBLE_BUILD = "+incompatible"
    DEFAULT_QUERIES = ["master", "default"]
    LATEST_QUERY = "latest"

    # Module proxy protocol
    PROXY_HEADER_DISABLE_FETCH = "Disable-Module-Fetch"
    PROXY_NOT_FOUND_CODES = [404, 410]
    PROXY_MAX_MAJOR_HOPS = 100

    # list fan-out
    LIST_CONCURRENCY_CACHED = 3
    LIST_CONCURRENCY_UNCACHED = 1

    HTTP_RETRY_MAX = 3
    HTTP_CACHE_TTL_SEC = 300

    # Directories never walked when rewriting import paths
    SKIP_DIRS = ["vendor", "testdata"]

    ENV_GOPROXY = "GOPROXY"
    ENV_GOPRIVATE = "GOPRIVATE"
    ENV_GONOPROXY = "GONOPROXY"
    ENV_LOG_LEVEL = "GOMAJOR_LOG_LEVEL"
