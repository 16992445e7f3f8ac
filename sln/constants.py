"""sln constants."""

from __future__ import annotations

DEFAULT_CONFIG_FILE = "sln.json"
DEFAULT_RUNTIME = "python3.12"

DEFAULT_AWS_DELAY_MS = 5000
DEFAULT_AWS_RETRIES = 5

GATEWAY_RETRY_DELAY_MS = 3000
GATEWAY_RETRY_ATTEMPTS = 10

LATEST_ALIAS = "latest"
LATEST_VERSION = "$LATEST"

LOG_POLICY_NAME = "log-writer"
RECURSION_POLICY_NAME = "recursive-execution"

MEMORY_MIN = 128
MEMORY_MAX = 10240
MEMORY_STEP = 64
TIMEOUT_MIN = 1
TIMEOUT_MAX = 900

API_PROXY_HANDLER = "proxy_router"
API_STAGE_VERSION_VARIABLE = "lambdaVersion"

DEFAULT_S3_EVENTS = ("s3:ObjectCreated:*",)

PROJECT_FILE = "pyproject.toml"
REQUIREMENTS_FILE = "requirements.txt"

PACKAGE_EXCLUDES = [
    "**/.git/**",
    "**/__pycache__/**",
    "**/*.pyc",
    "**/.venv/**",
    "**/.pytest_cache/**",
    "**/.mypy_cache/**",
    "**/.tox/**",
    "**/*.zip",
]
