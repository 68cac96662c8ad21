"""
Deployment settings for the gateway functions.

These are the provisioning inputs the external infrastructure code shares
with the build: which handlers exist, where their sources and artifacts live
and how the execution service runs them.
"""

import os
from pathlib import Path
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, field_validator

ENTRY_MODULE = 'index'
ENTRY_FILE = f'{ENTRY_MODULE}.py'
ENTRY_POINT = f'{ENTRY_MODULE}.handler'
REQUIREMENTS_FILE = 'requirements.txt'


def discover_handlers(source_dir: Path) -> List[str]:
    """Return the names of the directories under ``source_dir`` holding an entry file."""
    return sorted(
        child.name
        for child in source_dir.iterdir()
        if child.is_dir() and (child / ENTRY_FILE).is_file()
    )


class DeploySettings(BaseModel):
    """Inputs shared by the build and the gateway template."""

    handlers: Annotated[List[str], Field(
        min_length=1,
        description='Handler names, used verbatim in artifact names and route paths',
        examples=[['function1', 'function2']]
    )]

    region: Annotated[str, Field(
        description='AWS region the functions are deployed to'
    )] = 'us-east-1'

    source_dir: Annotated[Path, Field(
        description='Root holding one directory per handler plus shared packages'
    )]

    dist_dir: Annotated[Path, Field(
        description='Directory the artifacts are written to'
    )]

    runtime: Annotated[str, Field(
        description='Execution service runtime identifier'
    )] = 'python3.12'

    platform: Annotated[Optional[str], Field(
        description='pip platform tag dependencies are installed for; the build host when unset',
        examples=['manylinux2014_x86_64', 'manylinux2014_aarch64']
    )] = None

    entry_point: Annotated[str, Field(
        description='Handler path configured on every function'
    )] = ENTRY_POINT

    timeout_seconds: Annotated[int, Field(
        description='Timeout enforced by the execution service',
        ge=1,
        le=900
    )] = 20

    memory_mb: Annotated[int, Field(
        description='Function memory allocation in MB',
        ge=128,
        le=10240
    )] = 128

    api_title: Annotated[str, Field(
        description='Title of the generated gateway template'
    )] = 'Gateway Functions API'

    api_version: Annotated[str, Field(
        description='Version of the generated gateway template'
    )] = '1.0.0'

    @field_validator('handlers')
    @classmethod
    def validate_handler_names(cls, names: List[str]) -> List[str]:
        """Names end up in URLs and filenames."""
        import re
        for name in names:
            if not re.fullmatch(r'[A-Za-z0-9_-]+', name):
                raise ValueError(f'Invalid handler name: {name!r}')
        if len(set(names)) != len(names):
            raise ValueError('Handler names must be unique')
        return names

    @property
    def python_version(self) -> Optional[str]:
        """Interpreter version of the runtime, e.g. ``3.12`` for ``python3.12``."""
        if self.runtime.startswith('python'):
            return self.runtime[len('python'):]
        return None

    def handler_source(self, name: str) -> Path:
        return self.source_dir / name / ENTRY_FILE

    def artifact_path(self, name: str) -> Path:
        return self.dist_dir / f'{name}.zip'

    @classmethod
    def from_project(
        cls,
        project_root: Path,
        handlers: Optional[List[str]] = None,
        region: Optional[str] = None,
        dist_dir: Optional[Path] = None,
        platform: Optional[str] = None,
    ) -> 'DeploySettings':
        """
        Build settings for a checkout laid out as ``src/<handler>/index.py``.

        Args:
            project_root: repository root
            handlers: handler names; discovered from ``src`` when omitted
            region: target region; falls back to ``AWS_REGION``
            dist_dir: artifact directory; ``<root>/dist`` when omitted
            platform: pip platform tag for bundled dependencies

        Returns:
            Validated settings
        """
        source_dir = project_root / 'src'
        return cls(
            handlers=handlers or discover_handlers(source_dir),
            region=region or os.environ.get('AWS_REGION', 'us-east-1'),
            source_dir=source_dir,
            dist_dir=dist_dir or project_root / 'dist',
            platform=platform,
        )
