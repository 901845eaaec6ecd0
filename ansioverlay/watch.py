"""Detection of rewrites of a watched file."""

from __future__ import annotations

import os

_Signature = tuple[int, int, int]


class FileWatcher:
    """Reports whether a file has been written since the last check."""

    def __init__(self, filename: str | os.PathLike[str]) -> None:
        self.filename = os.fspath(filename)
        self._signature: _Signature | None = self._stat()

    def _stat(self) -> _Signature:
        st = os.stat(self.filename)
        return (st.st_ino, st.st_size, st.st_mtime_ns)

    def has_file_been_rewritten(self) -> bool:
        """True once for every change of the file's content or identity.

        A file that disappears is not reported; it is reported when it comes back.
        """
        try:
            signature: _Signature | None = self._stat()
        except OSError:
            signature = None
        if signature == self._signature:
            return False
        self._signature = signature
        return signature is not None