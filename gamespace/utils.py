import os
import tempfile
from pathlib import Path
from typing import Iterable, Union

PathLike = Union[str, Path]


def path_exists(p: PathLike) -> bool:
    try:
        return Path(p).exists()
    except (OSError, ValueError):
        # ValueError: embedded NUL in a hand-typed path
        return False


def atomic_write_lines(target: PathLike, lines: Iterable[str], encoding: str = "utf-8") -> None:
    """Write ``lines`` to ``target`` via a sibling temp file and ``os.replace``.

    Text mode translates ``\\n`` to the platform line separator. On failure the
    temp file is removed and the previous content of ``target`` is untouched.
    """
    target = Path(target)
    directory = target.parent if str(target.parent) else Path(".")
    fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(directory))
    try:
        with os.fdopen(fd, "w", encoding=encoding) as fh:
            for line in lines:
                fh.write(line)
                fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, target)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
