"""Staged diff production and serialization.

Diffs are produced as a lazy sequence of classified DiffLine values by
walking two trees with dulwich, and rendered to text by a single fold over
that sequence. The sequence is single-pass: render a fresh one for every call.
"""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING, Final

from dulwich.diff_tree import CHANGE_ADD, CHANGE_DELETE, tree_changes
from dulwich.objects import S_ISGITLINK, Blob
from dulwich.patch import is_binary, unified_diff

from distill.repository._models import DiffLine, DiffOrigin

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from dulwich.diff_tree import TreeChange
    from dulwich.object_store import BaseObjectStore

# Prefixes emitted for each origin; origins not listed are dropped
_PREFIXES: Final[Mapping[DiffOrigin, str]] = {
    DiffOrigin.ADDITION: "+",
    DiffOrigin.DELETION: "-",
    DiffOrigin.CONTEXT: " ",
    DiffOrigin.FILE_HEADER: "--- ",
    DiffOrigin.HUNK_HEADER: "@@ ",
}

_LINE_ORIGINS: Final[Mapping[bytes, DiffOrigin]] = {
    b" ": DiffOrigin.CONTEXT,
    b"+": DiffOrigin.ADDITION,
    b"-": DiffOrigin.DELETION,
}

_HUNK_MARKER: Final = b"@@ "
_DEV_NULL: Final = b"/dev/null"
# Abbreviated object ids in "index" lines, as git shows them by default
_ABBREV: Final = 7
_NULL_SHA: Final = b"0" * _ABBREV


def iter_tree_diff(
    store: BaseObjectStore, old_tree: bytes, new_tree: bytes
) -> Iterator[DiffLine]:
    """Yield classified diff lines between two trees.

    Files come in the order dulwich walks the trees (lexical path order),
    hunks in file order and lines in hunk order.

    Args:
        store: Object store holding both trees and their blobs.
        old_tree: SHA of the old tree (usually HEAD's).
        new_tree: SHA of the new tree (usually written from the index).

    Yields:
        DiffLine values for every changed file.
    """
    for change in tree_changes(store, old_tree, new_tree):
        yield from _iter_change(store, change)


def render_patch(lines: Iterable[DiffLine]) -> str:
    """Fold classified diff lines into unified patch text.

    Args:
        lines: Diff lines in the order they should appear.

    Returns:
        Patch text; lines with dropped origins or undecodable content
        contribute nothing.
    """
    return "".join(_render_line(line) for line in lines)


def _render_line(line: DiffLine) -> str:
    prefix = _PREFIXES.get(line.origin)
    if prefix is None:
        return ""
    try:
        text = line.content.decode("utf-8")
    except UnicodeDecodeError:
        return ""
    return prefix + text


def _iter_change(store: BaseObjectStore, change: TreeChange) -> Iterator[DiffLine]:
    """Yield the lines for a single changed file.

    Args:
        store: Object store to read blobs from.
        change: The TreeChange to render.

    Yields:
        A file header followed by hunks, or a single binary notice.
    """
    old, new = change.old, change.new
    path = (new.path if new else None) or (old.path if old else None) or b""
    old_content = _blob_data(store, old.mode, old.sha) if old else b""
    new_content = _blob_data(store, new.mode, new.sha) if new else b""

    if is_binary(old_content) or is_binary(new_content):
        yield DiffLine(
            DiffOrigin.BINARY,
            b"Binary files a/" + path + b" and b/" + path + b" differ\n",
        )
        return

    yield DiffLine(DiffOrigin.FILE_HEADER, _file_header(change, path))

    diff_lines = unified_diff(_split_lines(old_content), _split_lines(new_content))
    # The first two lines are the ---/+++ file markers, already in the header
    for index, raw in enumerate(diff_lines):
        if index < 2:  # noqa: PLR2004
            continue
        yield from _classify(raw)


def _file_header(change: TreeChange, path: bytes) -> bytes:
    """Build the git style header block for one changed file.

    Args:
        change: The TreeChange being rendered.
        path: Repository-relative path of the file.

    Returns:
        The "diff --git" line, any mode lines, the "index" line and the
        ---/+++ markers, each newline terminated. A change to the mode alone
        has no index line and no markers, like git.
    """
    old, new = change.old, change.new
    a_path = b"a/" + path
    b_path = b"b/" + path
    lines = [b"diff --git " + a_path + b" " + b_path]
    if change.type == CHANGE_ADD and new is not None:
        lines.append(b"new file mode " + _format_mode(new.mode))
    elif change.type == CHANGE_DELETE and old is not None:
        lines.append(b"deleted file mode " + _format_mode(old.mode))
    elif old is not None and new is not None and old.mode != new.mode:
        lines.append(b"old mode " + _format_mode(old.mode))
        lines.append(b"new mode " + _format_mode(new.mode))

    old_sha = old.sha if old else None
    new_sha = new.sha if new else None
    if old_sha != new_sha:
        index_line = b"index " + _abbrev(old_sha) + b".." + _abbrev(new_sha)
        if old is not None and new is not None and old.mode == new.mode:
            index_line += b" " + _format_mode(new.mode)
        lines.append(index_line)
        lines.append(b"--- " + (a_path if old else _DEV_NULL))
        lines.append(b"+++ " + (b_path if new else _DEV_NULL))

    return b"".join(line + b"\n" for line in lines)


def _format_mode(mode: int) -> bytes:
    return f"{mode:06o}".encode("ascii")


def _abbrev(sha: bytes | None) -> bytes:
    return sha[:_ABBREV] if sha else _NULL_SHA


def _split_lines(content: bytes) -> list[bytes]:
    """Split blob content into lines on LF only, keeping line endings.

    A lone CR is not a line break for git, unlike for bytes.splitlines().
    """
    return BytesIO(content).readlines()


def _classify(raw: bytes) -> Iterator[DiffLine]:
    """Classify one line produced by dulwich's unified_diff.

    dulwich appends the "no newline at end of file" notice to the line it
    belongs to, so that notice is split off into its own line here.

    Args:
        raw: A line from unified_diff, including its marker.

    Yields:
        One DiffLine, or two when an end-of-file notice is attached.
    """
    if raw.startswith(_HUNK_MARKER):
        yield DiffLine(DiffOrigin.HUNK_HEADER, raw[len(_HUNK_MARKER) :])
        return

    origin = _LINE_ORIGINS.get(raw[:1])
    if origin is None:
        return

    head, sep, tail = raw[1:].partition(b"\n")
    yield DiffLine(origin, head + sep)
    if tail:
        yield DiffLine(DiffOrigin.EOF_NOTICE, tail)


def _blob_data(store: BaseObjectStore, mode: int | None, sha: bytes | None) -> bytes:
    """Get the content of a tree entry.

    Args:
        store: Object store to read from.
        mode: Tree entry mode.
        sha: Object SHA, or None for a missing side.

    Returns:
        Blob bytes; submodules render as their commit pointer like git does.
    """
    if sha is None:
        return b""
    if mode is not None and S_ISGITLINK(mode):
        return b"Subproject commit " + sha + b"\n"
    obj = store[sha]
    if isinstance(obj, Blob):
        return obj.as_raw_string()
    return b""
