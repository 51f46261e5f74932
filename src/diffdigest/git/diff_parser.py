"""Split a unified diff into per-file change records.

The raw diff is segmented in a single pass (one segment per ``diff --git``
header), then each ``--name-status`` entry is bound to its segment by path.
Malformed input never raises: unknown status lines are skipped and files
without a matching segment get an empty ``diff_text``.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from diffdigest.git.models import ChangeKind, ChangeRecord

# --- Regex patterns for diff segmentation ---

_DIFF_HEADER_RE = re.compile(r"^diff --git .*$", re.MULTILINE)
# Either side may be C-quoted by git when the path holds special characters
_HEADER_PATHS_RE = re.compile(
    r'^diff --git (?:"(?:[^"\\]|\\.)*"|a/.*) (?P<new>"b/(?:[^"\\]|\\.)*"|b/.*)$'
)
_BINARY_RE = re.compile(r"^(?:Binary files .* differ|GIT binary patch)\s*$", re.MULTILINE)

_C_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A,
    "v": 0x0B, "f": 0x0C, "r": 0x0D, '"': 0x22, "\\": 0x5C,
}


def unquote_path(path: str) -> str:
    """Undo git's C-style path quoting (``"caf\\303\\251.png"`` -> ``café.png``).

    Unquoted paths are returned unchanged.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    out = bytearray()
    idx = 0
    while idx < len(body):
        ch = body[idx]
        if ch != "\\" or idx + 1 == len(body):
            out += ch.encode("utf-8")
            idx += 1
            continue
        nxt = body[idx + 1]
        octal = body[idx + 1:idx + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            out.append(int(octal, 8) & 0xFF)
            idx += 4
        elif nxt in _C_ESCAPES:
            out.append(_C_ESCAPES[nxt])
            idx += 2
        else:
            out += nxt.encode("utf-8")
            idx += 2
    return out.decode("utf-8", errors="replace")


def header_path(line: str) -> Optional[str]:
    """Return the post-image path named by a ``diff --git`` header line."""
    match = _HEADER_PATHS_RE.match(line.rstrip("\r"))
    if match is None:
        return None
    return unquote_path(match.group("new"))[2:]


def _parse_status_line(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(code, path)`` for a name-status line, or None if malformed.

    Rename and copy lines carry ``<code>\\t<old>\\t<new>``; the new path wins.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    parts = line.split("\t")
    if len(parts) not in (2, 3):
        return None
    code, path = parts[0].strip(), unquote_path(parts[-1])
    if not code or not path:
        return None
    return code, path


class DiffRecordParser:
    """Parse a raw unified diff plus a status listing into ChangeRecords.

    Usage::

        parser = DiffRecordParser(raw_diff, status_listing)
        for record in parser.parse():
            ...
    """

    def __init__(self, raw_diff: str, status_listing: str) -> None:
        self._raw = raw_diff or ""
        self._status = status_listing or ""
        # header path -> first segment index
        self._exact: Dict[str, int] = {}
        # "/"-separated suffix of a header path -> first segment index
        self._suffix: Dict[str, int] = {}
        self._segments: List[str] = []
        self._paths: List[str] = []
        self._built = False

    def parse(self) -> List[ChangeRecord]:
        """Return one record per status entry, in status-listing order."""
        self._build_segments()

        records: List[ChangeRecord] = []
        seen: set[str] = set()
        for line in self._status.splitlines():
            parsed = _parse_status_line(line)
            if parsed is None:
                continue
            code, path = parsed
            if path in seen:
                # Duplicate path in one listing: first entry wins
                continue
            seen.add(path)

            segment = self._segment_for(path)
            records.append(
                ChangeRecord(
                    path=path,
                    kind=ChangeKind.from_status(code),
                    is_binary=bool(segment) and _BINARY_RE.search(segment) is not None,
                    diff_text=segment,
                )
            )
        return records

    def segments(self) -> List[Tuple[str, str]]:
        """Return ``(path, segment)`` pairs in diff order."""
        self._build_segments()
        return list(zip(self._paths, self._segments))

    # ---- internals ----

    def _build_segments(self) -> None:
        if self._built:
            return
        self._built = True

        headers = list(_DIFF_HEADER_RE.finditer(self._raw))
        for idx, match in enumerate(headers):
            end = headers[idx + 1].start() if idx + 1 < len(headers) else len(self._raw)
            self._segments.append(self._raw[match.start():end])

            path = header_path(match.group(0))
            self._paths.append(path or "")
            if not path:
                # Unparseable header still bounds the neighbouring segments
                continue
            self._exact.setdefault(path, idx)
            # Index every "/"-suffix so status paths with a different prefix still bind
            pos = path.find("/")
            while pos != -1:
                self._suffix.setdefault(path[pos + 1:], idx)
                pos = path.find("/", pos + 1)

    def _segment_for(self, path: str) -> str:
        idx = self._exact.get(path)
        if idx is None:
            idx = self._suffix.get(path)
        if idx is None:
            return ""
        return self._segments[idx]
