"""
Shared helper utilities for CDK stack construction.

This module provides:
- Region abbreviation mapping for stack naming
- Resource naming function (rn)
- Bucket name allocation with random suffixes
- Stack configuration loaded from context and environment
"""

import os
import random
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from constructs import Construct

from goals_stack.errors import ErrorCode, StackConfigError

# Region abbreviation mapping for stack naming
# Pattern: GoalsStack-{region_abbrev}-{env} e.g. GoalsStack-ue1-dev
REGION_ABBREVIATIONS: dict[str, str] = {
    "us-east-1": "ue1",
    "us-east-2": "ue2",
    "us-west-1": "uw1",
    "us-west-2": "uw2",
    "eu-west-1": "ew1",
    "eu-west-2": "ew2",
    "eu-west-3": "ew3",
    "eu-central-1": "ec1",
    "eu-north-1": "en1",
    "ap-northeast-1": "ane1",  # Tokyo
    "ap-northeast-2": "ane2",  # Seoul
    "ap-southeast-1": "ase1",  # Singapore
    "ap-southeast-2": "ase2",  # Sydney
    "ap-south-1": "as1",  # Mumbai
    "sa-east-1": "se1",  # Sao Paulo
    "ca-central-1": "cc1",  # Canada
}

# Relative to the directory holding app.py
DEFAULT_FUNCTIONS_DIR = "../functions"
DEFAULT_ASSETS_ARCHIVE_DIR = "../assets/archive"

MIN_SUFFIX_RANGE = 1_000_000

# Project names end up in pipeline artifact names, which allow only these characters
_PROJECT_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def get_region() -> str:
    """Get the AWS region from environment variables or default to us-east-1."""
    return os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION") or "us-east-1"


def get_region_abbrev(region: Optional[str] = None) -> str:
    """Get the region abbreviation for stack naming.

    Args:
        region: AWS region code. If None, reads from environment.

    Returns:
        Region abbreviation (e.g., 'ue1' for 'us-east-1')
    """
    if region is None:
        region = get_region()
    return REGION_ABBREVIATIONS.get(region, region[:3])


def make_resource_namer(project_name: str) -> Callable[[str], str]:
    """Create a resource naming function.

    Args:
        project_name: Project name used as the prefix (e.g., 'MyCdkGoals')

    Returns:
        A function that takes a base name and returns a fully qualified name
    """

    def rn(name: str, project: str = project_name) -> str:
        """Generate resource name with the project prefix."""
        return f"{project}-{name}"

    return rn


def get_context_bool(scope: Construct, key: str, default: bool = False) -> bool:
    """Read a boolean flag from CDK context.

    Context passed on the command line (-c key=value) arrives as a string.
    """
    value = scope.node.try_get_context(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() != "false"


def load_env_file(env_file: Path) -> None:
    """Load KEY=VALUE lines from a .env file into os.environ.

    Variables already present in the environment are left untouched.
    """
    if not env_file.exists():
        return
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                if key.strip() and not os.getenv(key.strip()):
                    os.environ[key.strip()] = value.strip()


class NameAllocator:
    """Allocates globally unique bucket names for one construction run.

    Each allocator hands out distinct integer suffixes, so the three buckets
    of a stack never share a name. Uniqueness across runs is probabilistic.
    """

    def __init__(
        self,
        prefix: str,
        seed: Optional[Union[int, str]] = None,
        suffix_range: int = MIN_SUFFIX_RANGE,
    ) -> None:
        if suffix_range < MIN_SUFFIX_RANGE:
            raise StackConfigError(
                ErrorCode.INVALID_CONFIG,
                f"suffix_range must be at least {MIN_SUFFIX_RANGE}",
                {"suffixRange": suffix_range},
            )
        self.prefix = prefix
        self.suffix_range = suffix_range
        self.run_id = str(uuid.uuid4())
        self._random = random.Random(seed)
        self._issued: set[int] = set()

    def suffix(self) -> int:
        """Return a suffix not yet issued by this allocator."""
        if len(self._issued) >= self.suffix_range:
            raise StackConfigError(
                ErrorCode.NAME_SPACE_EXHAUSTED,
                "No unused bucket suffixes remain",
                {"suffixRange": self.suffix_range},
            )
        while True:
            value = self._random.randrange(self.suffix_range)
            if value not in self._issued:
                self._issued.add(value)
                return value

    def bucket_name(self, role: str) -> str:
        """Generate a bucket name such as aws-fullstack-template-website-123456."""
        return f"{self.prefix}-{role}-{self.suffix()}"


@dataclass(frozen=True)
class StackConfig:
    """Values that parameterize the goals stack."""

    project_name: str = "MyCdkGoals"
    table_name: str = "CdkGoals"
    website_index_document: str = "index.html"
    bucket_prefix: str = "aws-fullstack-template"
    source_object_key: str = "assets.zip"
    functions_dir: str = DEFAULT_FUNCTIONS_DIR
    assets_archive_dir: Optional[str] = DEFAULT_ASSETS_ARCHIVE_DIR
    build_spec_filename: str = "buildspec.yml"

    def __post_init__(self) -> None:
        if not self.project_name or not _PROJECT_NAME_PATTERN.match(self.project_name):
            raise StackConfigError(
                ErrorCode.INVALID_PROJECT_NAME,
                "Project name must be non-empty and contain only letters, digits, '-' and '_'",
                {"projectName": self.project_name},
            )
        if not self.table_name:
            raise StackConfigError(ErrorCode.INVALID_CONFIG, "Table name must not be empty")


# (field, context key, environment variable)
_CONFIG_SOURCES = (
    ("project_name", "project_name", "PROJECT_NAME"),
    ("table_name", "table_name", "GOALS_TABLE_NAME"),
    ("bucket_prefix", "bucket_prefix", "BUCKET_PREFIX"),
    ("functions_dir", "functions_dir", "FUNCTIONS_DIR"),
    ("assets_archive_dir", "assets_archive_dir", "ASSETS_ARCHIVE_DIR"),
)


_PATH_FIELDS = ("functions_dir", "assets_archive_dir")


def load_stack_config(scope: Construct, base_dir: Optional[Path] = None) -> StackConfig:
    """Build a StackConfig from CDK context, then environment, then defaults.

    Relative directories are resolved against base_dir, which defaults to the
    current working directory.
    """
    base_dir = Path(base_dir) if base_dir else Path.cwd()
    overrides: dict[str, Any] = {}
    for field_name, context_key, env_var in _CONFIG_SOURCES:
        value = scope.node.try_get_context(context_key) or os.getenv(env_var)
        if value:
            overrides[field_name] = str(value)
    for field_name in _PATH_FIELDS:
        path = overrides.get(field_name, getattr(StackConfig, field_name))
        overrides[field_name] = str((base_dir / path).resolve())
    if not get_context_bool(scope, "seed_assets", default=True):
        overrides["assets_archive_dir"] = None
    return StackConfig(**overrides)
