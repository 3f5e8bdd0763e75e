"""
Menu Publisher

Writes the menu the ordering front end reads from the public directory.
The payload is stored verbatim: there is no schema, so a malformed
menu is published just as faithfully as a good one.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

from filelock import FileLock, Timeout

from orderdesk.exceptions import MenuPublishError

logger = logging.getLogger(__name__)


class MenuPublisher:
    """Overwrites a fixed JSON file with whatever menu it is given."""

    def __init__(self, path: Union[str, Path], lock_timeout: int = 10):
        self.path = Path(path).resolve()
        # Beside the served directory, never inside it
        served = self.path.parent
        self.lock_path = served.parent / f".{served.name}-{self.path.name}.lock"
        self.lock_timeout = lock_timeout

    def publish(self, payload: Any) -> Path:
        """
        Replace the published menu with ``payload``.

        Writers are serialized by a file lock, so the file always holds one
        complete payload; the last writer wins.

        Raises:
            MenuPublishError: If the payload cannot be written
        """
        try:
            text = json.dumps(payload, indent=2, ensure_ascii=False)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)

            with FileLock(str(self.lock_path), timeout=self.lock_timeout):
                self.path.write_text(text, encoding="utf-8")

        except Timeout as e:
            logger.error(f"Lock timeout ({self.lock_timeout}s) publishing {self.path}")
            raise MenuPublishError(f"Lock timeout ({self.lock_timeout}s)") from e
        except (OSError, TypeError, ValueError) as e:
            logger.exception(f"Failed to publish menu to {self.path}")
            raise MenuPublishError(str(e)) from e

        logger.info(f"Menu published to {self.path}")
        return self.path
