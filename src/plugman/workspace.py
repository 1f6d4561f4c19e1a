"""Working areas - transient per-URL staging directories."""

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from .exceptions import FetchError

logger = logging.getLogger(__name__)


@contextmanager
def working_area(root: Path | None = None) -> Iterator[Path]:
    """
    Create a uniquely named staging directory and always remove it afterwards.

    Removal is best effort: a failure to delete is logged, never raised.

    Args:
        root: Parent directory (defaults to the system temp directory)

    Raises:
        FetchError: If the directory can't be created (fails only the current URL)

    Example:
        >>> with working_area() as work:
        ...     (work / "plugin.zip").write_bytes(data)
    """
    stamp = datetime.now().strftime("%Y%m%d%H%M%S")
    try:
        path = Path(tempfile.mkdtemp(prefix=f"plugman-{stamp}-", dir=root))
    except OSError as e:
        raise FetchError(f"Cannot create working area under {root or tempfile.gettempdir()}: {e}") from e
    logger.debug(f"Created working area {path}")
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
            logger.debug(f"Removed working area {path}")
        except OSError as e:
            logger.debug(f"Could not remove working area {path}: {e}")
