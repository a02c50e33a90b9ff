"""
Editing bookmarks in an external editor.

A bookmark is rendered into a small text template, written to a uniquely
named scratch file, handed to the user's editor and parsed back. The
scratch file is removed on every exit path: success, parse failure,
editor failure and interrupt.
"""
import logging
import os
import shlex
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Generator, List, Optional

from bkmr.constants import (
    DEFAULT_EDITOR,
    DEFAULT_WINDOWS_EDITOR,
    TEMPLATE_COMMENT,
    TEMPLATE_FIELD_COUNT,
)
from bkmr.errors import ExternalProcessError, TemplateParseError, TempFileError
from bkmr.models import Bookmark
from bkmr.tags import TagSet

logger = logging.getLogger(__name__)

TEMPLATE = """\
# Lines beginning with "#" will be stripped.
# Add URL in next line (single line).
{url}
# Add TITLE in next line (single line). Leave blank for no title.
{title}
# Add comma-separated TAGS in next line (single line).
{tags}
# Add DESCRIPTION in next line(s).
{description}
"""


@dataclass
class EditedFields:
    """The four fields recovered from an edited template."""
    url: str
    title: str
    tags: TagSet
    description: str


def _protect(value: str) -> str:
    # Value lines starting with the comment marker get a leading space so
    # they survive the comment stripping in parse_template.
    return "\n".join(
        f" {line}" if line.startswith(TEMPLATE_COMMENT) else line
        for line in value.split("\n")
    )


def _unprotect(line: str) -> str:
    if line.startswith(f" {TEMPLATE_COMMENT}"):
        return line[1:]
    return line


def render_template(bookmark: Bookmark) -> str:
    tags = TagSet.normalize(bookmark.tags)
    return TEMPLATE.format(
        url=_protect(bookmark.url),
        title=_protect(bookmark.title or ""),
        tags=_protect(",".join(tags)),
        description=_protect(bookmark.description or ""),
    )


def parse_template(text: str) -> EditedFields:
    """
    Parse an edited template.

    Comment lines are dropped. The remaining lines are url, title, tags
    and description; description may span several lines. A value line
    written as `` #...`` is read back without the leading space.

    Raises:
        TemplateParseError: fewer than four lines remain or the url is empty
    """
    lines: List[str] = [
        _unprotect(line) for line in text.splitlines()
        if not line.startswith(TEMPLATE_COMMENT)
    ]
    if len(lines) < TEMPLATE_FIELD_COUNT:
        raise TemplateParseError(
            f"Expected {TEMPLATE_FIELD_COUNT} lines (url, title, tags, description), got {len(lines)}"
        )

    url = lines[0].strip()
    if not url:
        raise TemplateParseError("URL line is empty")

    return EditedFields(
        url=url,
        title=lines[1].strip(),
        tags=TagSet.normalize(lines[2]),
        description="\n".join(lines[3:]).strip(),
    )


@contextmanager
def scratch_file(content: str, suffix: str = ".txt") -> Generator[Path, None, None]:
    """
    Write ``content`` to a uniquely named temporary file and remove it on exit.

    Raises:
        TempFileError: the file could not be created or written
    """
    try:
        fd, name = tempfile.mkstemp(prefix="bkmr-", suffix=suffix)
    except OSError as e:
        raise TempFileError(f"Cannot create temp file: {e}") from e

    path = Path(name)
    try:
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise TempFileError(f"Cannot write temp file {path}: {e}") from e
        yield path
    finally:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", path, e)


def editor_command(editor: Optional[str] = None) -> List[str]:
    """Resolve the editor: explicit setting, $VISUAL, $EDITOR, then a platform default."""
    editor = editor or os.environ.get("VISUAL") or os.environ.get("EDITOR")
    if editor:
        return shlex.split(editor)
    return [DEFAULT_WINDOWS_EDITOR] if os.name == "nt" else [DEFAULT_EDITOR]


def launch_editor(path: Path, editor: Optional[str] = None) -> None:
    """
    Open ``path`` in the editor and wait for it to exit.

    Raises:
        ExternalProcessError: the editor could not be started or exited nonzero
    """
    cmd = editor_command(editor) + [str(path)]
    logger.debug("Launching editor: %s", cmd)
    try:
        returncode = subprocess.call(cmd, shell=False)
    except OSError as e:
        raise ExternalProcessError(" ".join(cmd), reason=str(e)) from e
    if returncode != 0:
        raise ExternalProcessError(" ".join(cmd), returncode=returncode)


def edit_in_editor(bookmark: Bookmark, editor: Optional[str] = None) -> EditedFields:
    """Round-trip a bookmark through the editor and return the edited fields."""
    with scratch_file(render_template(bookmark)) as path:
        launch_editor(path, editor)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise TempFileError(f"Cannot read temp file {path}: {e}") from e
    return parse_template(text)
