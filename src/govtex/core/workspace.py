from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from govtex.core.logging_setup import get_logger

logger = get_logger(__name__)

WORKSPACE_PREFIX = "latex-diff-"


@contextmanager
def scoped_workspace(keep: bool = False, parent: Optional[Path] = None) -> Iterator[Path]:
    """Yield a fresh, invocation-private temporary directory.

    The directory is removed on every exit path, including exceptions and
    ``KeyboardInterrupt``, unless ``keep`` is set.
    """
    workspace = Path(tempfile.mkdtemp(prefix=WORKSPACE_PREFIX, dir=parent))
    logger.info("workspace_created", path=str(workspace))
    try:
        yield workspace
    finally:
        if keep:
            logger.info("workspace_retained", path=str(workspace))
        else:
            shutil.rmtree(workspace, ignore_errors=True)
            logger.debug("workspace_removed", path=str(workspace))
