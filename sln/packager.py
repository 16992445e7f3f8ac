"""Build the deployment archive from a project directory."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import stat
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, List, Optional, Union, cast
from zipfile import ZIP_DEFLATED, ZipFile

import formic
import tomli
from pydantic import BaseModel

from .constants import PACKAGE_EXCLUDES, PROJECT_FILE, REQUIREMENTS_FILE
from .exceptions import PackageError, PipInstallFailedError

if TYPE_CHECKING:
    from ._logging import SlnLogger

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

ZIP_PERMS_MASK = (stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO) << 16


class ProjectMetadata(BaseModel):
    """Name and description of the project being deployed."""

    name: Optional[str] = None
    description: Optional[str] = None


class PackageOptions(BaseModel):
    """Options controlling how the archive is built."""

    handler: Optional[str] = None
    """``module.function``; the module must exist in the package."""

    api_module: Optional[str] = None
    """Module that must exist in the package."""

    name: str = "package"
    """Base name of the archive."""

    use_local_dependencies: bool = False
    """Ship dependencies already vendored in the project instead of running pip."""

    pip_options: Optional[str] = None
    """Extra arguments passed to ``pip install`` as is."""


def read_project_metadata(source_dir: Union[Path, str]) -> ProjectMetadata:
    """Read name and description from ``pyproject.toml``.

    ``[project]`` is preferred over ``[tool.poetry]``. A missing file results
    in empty metadata.

    Raises:
        PackageError: The file exists but isn't valid TOML.

    """
    project_file = Path(source_dir) / PROJECT_FILE
    if not project_file.is_file():
        return ProjectMetadata()
    try:
        data = tomli.loads(project_file.read_text())
    except tomli.TOMLDecodeError as exc:
        raise PackageError(f"unable to parse {project_file}: {exc}") from exc
    for section in (data.get("project"), data.get("tool", {}).get("poetry")):
        if section and section.get("name"):
            return ProjectMetadata(
                name=section["name"], description=section.get("description")
            )
    return ProjectMetadata()


def find_files(
    root: Union[Path, str],
    includes: Union[List[str], str] = "**",
    excludes: Optional[List[str]] = None,
    follow_symlinks: bool = False,
) -> Iterator[str]:
    """List files inside a directory based on include and exclude rules.

    Args:
        root: Base directory to list files from.
        includes: Inclusion patterns.
        excludes: Exclusion patterns; they take precedence over inclusions.
        follow_symlinks: Include symlinked files.

    Yields:
        File names relative to the root.

    """
    file_set = formic.FileSet(
        directory=os.path.abspath(root),
        include=includes,
        exclude=excludes,
        symlinks=follow_symlinks,
    )
    for name in file_set.qualified_files(absolute=False):
        yield os.path.normpath(name)


def zip_directory(root: Path, archive: Path) -> Path:
    """Zip every file of a directory.

    Files are stored with names relative to ``root`` and their permissions
    forced to 755 or 644 depending on whether they are user-executable.

    """
    files = sorted(find_files(root))
    with ZipFile(archive, "w", ZIP_DEFLATED) as zip_file:
        for file_name in files:
            zip_file.write(root / file_name, file_name)
        for zip_entry in zip_file.filelist:
            perms = (zip_entry.external_attr & ZIP_PERMS_MASK) >> 16
            new_perms = 0o755 if perms & stat.S_IXUSR != 0 else 0o644
            if new_perms != perms:
                LOGGER.debug("fixing perms: %s: %o => %o", zip_entry.filename, perms, new_perms)
                zip_entry.external_attr = (zip_entry.external_attr & ~ZIP_PERMS_MASK) | (
                    new_perms << 16
                )
    return archive


def pip_install(requirements: Path, target: Path, extend_args: Optional[str] = None) -> Path:
    """Install requirements into a directory.

    Raises:
        PipInstallFailedError: pip exited with an error.

    """
    cmd = [
        sys.executable,
        "-m",
        "pip",
        "install",
        "--disable-pip-version-check",
        "--no-input",
        "--requirement",
        str(requirements),
        "--target",
        str(target),
        *shlex.split(extend_args or ""),
    ]
    LOGGER.debug("generated command: %s", shlex.join(cmd))
    try:
        subprocess.check_call(cmd)
    except subprocess.CalledProcessError as exc:
        raise PipInstallFailedError from exc
    return target


class Packager:
    """Stage a project and zip it into a deployment archive."""

    def __init__(self, excludes: Optional[List[str]] = None) -> None:
        """Instantiate class.

        Args:
            excludes: Patterns never copied into the package.

        """
        self.excludes = excludes if excludes is not None else list(PACKAGE_EXCLUDES)

    def build(
        self,
        source_dir: Union[Path, str],
        staging_dir: Union[Path, str],
        options: PackageOptions,
    ) -> Path:
        """Build the archive.

        Args:
            source_dir: Project directory.
            staging_dir: Empty directory owned by the caller. The staged files
                end up in its ``package`` subdirectory, the archive beside it.
            options: Packaging options.

        Returns:
            Path to the archive.

        Raises:
            PackageError: Nothing to package or the handler module is missing.

        """
        source_dir = Path(source_dir).resolve()
        package_dir = self.stage(source_dir, Path(staging_dir))
        requirements = source_dir / REQUIREMENTS_FILE
        if requirements.is_file() and not options.use_local_dependencies:
            LOGGER.info("installing dependencies from %s", REQUIREMENTS_FILE)
            pip_install(requirements, package_dir, options.pip_options)
        self.validate_package(package_dir, options)
        archive = Path(staging_dir) / f"{options.name}.zip"
        zip_directory(package_dir, archive)
        LOGGER.verbose("packaged %s into %s", source_dir, archive)
        return archive

    def stage(self, source_dir: Path, staging_dir: Path) -> Path:
        """Copy the project into ``<staging_dir>/package``."""
        package_dir = staging_dir / "package"
        files = list(find_files(source_dir, excludes=self.excludes))
        if not files:
            raise PackageError(f"no files to package in {source_dir}")
        for file_name in files:
            dest = package_dir / file_name
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_dir / file_name, dest)
        LOGGER.debug("staged %s file(s) from %s", len(files), source_dir)
        return package_dir

    @staticmethod
    def validate_package(package_dir: Path, options: PackageOptions) -> None:
        """Make sure the module the function will load is in the package."""
        module = options.api_module
        if options.handler:
            module = options.handler.rsplit(".", 1)[0]
        if not module:
            return
        module_file = package_dir / f"{module.replace('.', '/')}.py"
        package_init = package_dir / module.replace(".", "/") / "__init__.py"
        if not module_file.is_file() and not package_init.is_file():
            raise PackageError(f"module {module} not found in the package ({module_file})")
