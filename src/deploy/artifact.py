"""
Artifact builder for the gateway functions.

A handler lives in ``<source_dir>/<name>/index.py``. Its artifact is
``<dist_dir>/<name>.zip`` holding ``index.py`` at the archive root plus every
local module it imports, laid out as on disk so imports resolve unchanged.
Third-party packages listed in the handler's ``requirements.txt`` are
installed with pip into a staging directory and bundled at the archive root,
so the artifact runs without any layer. Only the standard library is left to
the runtime.

Archives are deterministic: the same sources and the same installed
distributions always produce the same bytes, so the artifact hash changes
when the bundled code or a bundled dependency changes.
"""

import base64
import hashlib
import json
import os
import shutil
import subprocess
import sys
import zipfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from modulefinder import ModuleFinder
from pathlib import Path
from typing import Annotated, Dict, List, Optional, Sequence

from aws_lambda_powertools.logging import Logger
from pydantic import BaseModel, Field

from deploy.exceptions import (
    BuildError,
    CompileError,
    DependencyInstallError,
    MissingSourceError,
    UnresolvedDependencyError,
)
from deploy.settings import ENTRY_FILE, REQUIREMENTS_FILE, DeploySettings

logger = Logger(service='gateway-functions-build')

# Earliest timestamp a zip entry can hold
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)
ZIP_FILE_MODE = 0o644 << 16

MANIFEST_FILE = 'manifest.json'

# Written by pip or the interpreter; never part of an artifact
SKIPPED_DIRS = {'__pycache__'}
SKIPPED_SUFFIXES = {'.pyc'}
MODULE_SUFFIXES = {'.py', '.so'}


class BuildResult(BaseModel):
    """Outcome of one successful build."""

    name: Annotated[str, Field(description='Handler name')]
    artifact: Annotated[Path, Field(description='Path of the written zip')]
    sha256: Annotated[str, Field(description='Base64 SHA-256 of the zip, as used for source code hashes')]
    size_bytes: Annotated[int, Field(description='Size of the zip in bytes', ge=0)]
    modules: Annotated[List[str], Field(description='Local archive entries, sorted')]
    packages: Annotated[List[str], Field(
        description='Top-level names installed from requirements.txt, sorted'
    )] = []


def artifact_hash(path: Path) -> str:
    """Base64 encoded SHA-256 digest of a file."""
    digest = hashlib.sha256(Path(path).read_bytes()).digest()
    return base64.b64encode(digest).decode('ascii')


def _compile_check(source: Path, handler: str) -> None:
    try:
        compile(source.read_bytes(), str(source), 'exec')
    except SyntaxError as exc:
        raise CompileError(source, exc, handler=handler) from exc


def _is_local(top_level: str, roots: Sequence[Path]) -> bool:
    return any((root / top_level).is_dir() or (root / f'{top_level}.py').is_file() for root in roots)


def _is_bundled_or_stdlib(top_level: str, packages_dir: Optional[Path]) -> bool:
    if top_level in sys.stdlib_module_names:
        return True
    if packages_dir is None:
        return False
    if (packages_dir / top_level).is_dir():
        return True
    return any(path.suffix in MODULE_SUFFIXES for path in packages_dir.glob(f'{top_level}.*'))


def _local_source(module_name: str, roots: Sequence[Path]) -> Optional[Path]:
    parts = module_name.split('.')
    for root in roots:
        package_dir = root.joinpath(*parts)
        for candidate in (package_dir.parent / f'{parts[-1]}.py', package_dir / '__init__.py'):
            if candidate.is_file():
                return candidate
    return None


def _archive_name(path: Path, roots: Sequence[Path]) -> Optional[str]:
    for root in roots:
        if root in path.parents:
            return path.relative_to(root).as_posix()
    return None


def install_requirements(
    requirements: Path,
    target: Path,
    handler: str,
    platform: Optional[str] = None,
    python_version: Optional[str] = None,
) -> None:
    """
    Install a handler's requirements into ``target`` with pip.

    Without ``platform`` pip installs wheels for the interpreter running the
    build. With it, only binary wheels for that platform are accepted, as the
    execution service cannot compile extensions.

    Raises:
        DependencyInstallError: pip exited with a nonzero status
    """
    command = [
        sys.executable, '-m', 'pip', 'install',
        '-r', str(requirements),
        '-t', str(target),
        '--no-compile',
        '--disable-pip-version-check',
        '--quiet',
    ]
    if platform:
        command += ['--platform', platform, '--implementation', 'cp', '--only-binary=:all:']
        if python_version:
            command += ['--python-version', python_version]

    logger.info('Installing dependencies', extra={'handler': handler, 'requirements': str(requirements)})
    completed = subprocess.run(command, capture_output=True, text=True)
    if completed.returncode != 0:
        raise DependencyInstallError(requirements, completed.returncode, completed.stderr, handler=handler)


def package_files(packages_dir: Path) -> Dict[str, Path]:
    """Map archive names to the files pip installed under ``packages_dir``."""
    files = {}
    for root, dirs, filenames in os.walk(packages_dir):
        dirs[:] = [d for d in dirs if d not in SKIPPED_DIRS]
        for filename in filenames:
            path = Path(root) / filename
            if path.suffix in SKIPPED_SUFFIXES:
                continue
            files[path.relative_to(packages_dir).as_posix()] = path
    return files


def _top_level_names(files: Dict[str, Path]) -> List[str]:
    names = set()
    for arcname in files:
        first = arcname.split('/')[0]
        if first.endswith(('.dist-info', '.egg-info', '.pth')) or first == 'bin':
            continue
        names.add(first[:-3] if first.endswith('.py') else first.split('.')[0])
    return sorted(names)


def resolve_bundle(
    entry_file: Path,
    source_dir: Path,
    handler: str,
    packages_dir: Optional[Path] = None,
) -> Dict[str, Path]:
    """
    Collect the local files that make up a handler's artifact.

    The handler directory is searched before ``source_dir``, so a module next
    to the entry file lands at the archive root.

    Args:
        entry_file: resolved path of the handler's entry file
        source_dir: resolved root of the shared packages
        handler: handler name, for error reporting
        packages_dir: directory the handler's requirements were installed into

    Returns:
        Mapping of archive name to source file

    Raises:
        CompileError: entry file or a local module has a syntax error
        UnresolvedDependencyError: an import is neither local, installed from
            requirements.txt nor part of the standard library
    """
    roots = [entry_file.parent, source_dir]
    _compile_check(entry_file, handler)

    finder = ModuleFinder(path=[str(root) for root in roots])
    finder.run_script(str(entry_file))

    unresolved = []
    missing, _maybe = finder.any_missing_maybe()
    for module_name in missing:
        top_level = module_name.split('.')[0]
        if _is_local(top_level, roots):
            # modulefinder records local modules that fail to compile as missing
            source = _local_source(module_name, roots)
            if source is not None:
                _compile_check(source, handler)
            unresolved.append(module_name)
        elif not _is_bundled_or_stdlib(top_level, packages_dir):
            unresolved.append(module_name)

    if unresolved:
        raise UnresolvedDependencyError(unresolved, handler=handler)

    files = {ENTRY_FILE: entry_file}
    for module_name, module in finder.modules.items():
        if module_name == '__main__' or not module.__file__:
            continue
        path = Path(module.__file__).resolve()
        arcname = _archive_name(path, roots)
        if arcname is not None:
            files[arcname] = path

    return files


def _write_archive(files: Dict[str, Path], destination: Path) -> None:
    with zipfile.ZipFile(destination, 'w', zipfile.ZIP_DEFLATED) as zipf:
        for arcname in sorted(files):
            info = zipfile.ZipInfo(arcname, date_time=ZIP_TIMESTAMP)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = ZIP_FILE_MODE
            zipf.writestr(info, files[arcname].read_bytes())


def build(
    handler_source: Path,
    dist_dir: Path,
    source_dir: Optional[Path] = None,
    platform: Optional[str] = None,
    python_version: Optional[str] = None,
) -> BuildResult:
    """
    Package one handler into ``<dist_dir>/<name>.zip``.

    When ``requirements.txt`` sits next to the entry file its packages are
    installed into ``<dist_dir>/.<name>.packages`` and bundled with the local
    modules. The archive is written to a staging file next to the target and
    moved into place only when complete; a failed build leaves any previous
    artifact untouched.

    Args:
        handler_source: ``<source_dir>/<name>/index.py``
        dist_dir: output directory, created if needed
        source_dir: root of the shared packages; the grandparent of
            ``handler_source`` when omitted
        platform: pip platform tag to install wheels for, e.g.
            ``manylinux2014_x86_64``; the build interpreter's when omitted
        python_version: interpreter version to install wheels for, with ``platform``

    Returns:
        BuildResult describing the written artifact

    Raises:
        BuildError: the source is missing, does not compile, has unresolved
            imports or its requirements fail to install
    """
    handler_source = Path(handler_source)
    name = handler_source.parent.name
    if not handler_source.is_file():
        raise MissingSourceError(handler_source, handler=name)

    entry_file = handler_source.resolve()
    source_root = Path(source_dir).resolve() if source_dir else entry_file.parent.parent
    requirements = entry_file.parent / REQUIREMENTS_FILE

    logger.info('Building artifact', extra={'handler': name, 'source': str(entry_file)})

    dist_dir = Path(dist_dir)
    artifact = dist_dir / f'{name}.zip'
    staging = dist_dir / f'.{name}.zip.tmp'
    packages_dir = dist_dir / f'.{name}.packages'

    try:
        dependencies: Dict[str, Path] = {}
        bundled_dir = None
        if requirements.is_file():
            bundled_dir = packages_dir
            if packages_dir.exists():
                shutil.rmtree(packages_dir)
            packages_dir.mkdir(parents=True)
            install_requirements(requirements, packages_dir, name, platform, python_version)
            dependencies = package_files(packages_dir)

        local = resolve_bundle(entry_file, source_root, handler=name, packages_dir=bundled_dir)

        dist_dir.mkdir(parents=True, exist_ok=True)
        # Local modules shadow installed ones of the same name
        _write_archive({**dependencies, **local}, staging)
        os.replace(staging, artifact)
    finally:
        if staging.exists():
            staging.unlink()
        if packages_dir.exists():
            shutil.rmtree(packages_dir)

    result = BuildResult(
        name=name,
        artifact=artifact,
        sha256=artifact_hash(artifact),
        size_bytes=artifact.stat().st_size,
        modules=sorted(local),
        packages=_top_level_names(dependencies),
    )
    logger.info(
        'Artifact written',
        extra={'handler': name, 'artifact': str(artifact), 'sha256': result.sha256, 'size_bytes': result.size_bytes},
    )
    return result


def build_all(settings: DeploySettings, max_workers: Optional[int] = None) -> List[BuildResult]:
    """
    Build every handler in ``settings`` in parallel.

    Each build writes only its own files, so handlers never collide. All
    builds run to completion before a failure is raised; with several
    failures, the one of the earliest handler in ``settings.handlers`` wins.

    Returns:
        Build results in the order of ``settings.handlers``
    """
    results: Dict[str, BuildResult] = {}
    failures: Dict[str, BuildError] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(
                build,
                settings.handler_source(name),
                settings.dist_dir,
                settings.source_dir,
                settings.platform,
                settings.python_version,
            ): name
            for name in settings.handlers
        }
        for future in as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except BuildError as exc:
                logger.error('Artifact build failed', extra={'handler': name, 'error': exc.to_dict()})
                failures[name] = exc

    for name in settings.handlers:
        if name in failures:
            raise failures[name]

    return [results[name] for name in settings.handlers]


def write_manifest(results: List[BuildResult], settings: DeploySettings) -> Path:
    """
    Record the artifacts and their hashes for the provisioning layer.

    Returns:
        Path of the written manifest
    """
    manifest = {
        'region': settings.region,
        'runtime': settings.runtime,
        'entry_point': settings.entry_point,
        'timeout_seconds': settings.timeout_seconds,
        'functions': {
            result.name: {
                'artifact': result.artifact.name,
                'sha256': result.sha256,
                'size_bytes': result.size_bytes,
            }
            for result in results
        },
    }
    settings.dist_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = settings.dist_dir / MANIFEST_FILE
    manifest_path.write_text(json.dumps(manifest, indent=2, sort_keys=True) + '\n', encoding='utf-8')
    return manifest_path
