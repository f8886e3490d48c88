"""
Small static site generator: page generators, before-tasks and a file writer.

A PageGenerator enumerates paths ("clubs/sv-adler/index"), matches them against its pattern
("clubs/:slug/index"), asks get_data() for the page context and renders its template.
Builder.build() runs every task and generator into a staging directory next to the output
directory and only then swaps it into place: a failed build leaves the previous site intact,
and a successful one contains exactly what this run produced.
"""
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Protocol

import jinja2

from clubportal.core.errors import SiteBuildError

logger = logging.getLogger(__name__)


class Task(Protocol):
    def run(self, output_dir: Path) -> None:
        ...


@dataclass(frozen=True)
class PagePayload:
    path: str
    params: dict[str, str]


def match_pattern(pattern: str, path: str) -> dict[str, str] | None:
    """Params for `path` under `pattern` (":name" segments capture), or None when it does not match."""
    pattern_parts = pattern.strip("/").split("/")
    path_parts = path.strip("/").split("/")
    if len(pattern_parts) != len(path_parts):
        return None
    params: dict[str, str] = {}
    for expected, actual in zip(pattern_parts, path_parts):
        if expected.startswith(":"):
            if not actual:
                return None
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


class HTMLRenderer:
    """Jinja2 over one template directory. Layouts are plain {% extends %}."""

    def __init__(self, template_dir: str | Path, globals: dict[str, Any] | None = None):
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html"]),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
        )
        if globals:
            self.env.globals.update(globals)

    def render(self, template: str, data: dict[str, Any]) -> str:
        return self.env.get_template(template).render(**data)


@dataclass
class PageGenerator:
    template: str
    pattern: str
    get_paths: Callable[[], list[str]]
    get_data: Callable[[PagePayload], dict[str, Any]]
    renderer: HTMLRenderer


@dataclass
class CopyTask:
    """Copy a directory tree to output_dir/target."""

    source: str | Path
    target: str

    def run(self, output_dir: Path) -> None:
        source = Path(self.source)
        if not source.is_dir():
            raise SiteBuildError(f"asset directory {source} does not exist")
        shutil.copytree(source, output_dir / self.target, dirs_exist_ok=True)


class FileWriter:
    def write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


@dataclass
class Builder:
    output_dir: str | Path
    generators: list[PageGenerator]
    before_tasks: list[Task] = field(default_factory=list)
    writer: FileWriter = field(default_factory=FileWriter)

    def build(self) -> int:
        """Run the pipeline; returns the number of pages written. Raises SiteBuildError."""
        output_dir = Path(self.output_dir).resolve()
        staging = output_dir.with_name(output_dir.name + ".staging")
        try:
            _remove(staging)
            staging.mkdir(parents=True)
            pages = self._build_into(staging)
            self._swap(staging, output_dir)
        except SiteBuildError:
            self._discard(staging)
            raise
        except (jinja2.TemplateError, OSError) as e:
            self._discard(staging)
            raise SiteBuildError(f"{type(e).__name__}: {e}") from e
        return pages

    def _build_into(self, target: Path) -> int:
        for task in self.before_tasks:
            task.run(target)
        pages = 0
        for generator in self.generators:
            for path in generator.get_paths():
                params = match_pattern(generator.pattern, path)
                if params is None:
                    raise SiteBuildError(f"path {path!r} does not match pattern {generator.pattern!r}")
                data = generator.get_data(PagePayload(path=path, params=params))
                html = generator.renderer.render(generator.template, data)
                self.writer.write(target / f"{path.strip('/')}.html", html)
                pages += 1
        return pages

    @staticmethod
    def _swap(staging: Path, output_dir: Path) -> None:
        previous = output_dir.with_name(output_dir.name + ".previous")
        _remove(previous)
        if output_dir.exists():
            output_dir.rename(previous)
        staging.rename(output_dir)
        _remove(previous)

    @staticmethod
    def _discard(staging: Path) -> None:
        try:
            _remove(staging)
        except OSError:
            logger.warning("could not remove staging directory %s", staging, exc_info=True)
