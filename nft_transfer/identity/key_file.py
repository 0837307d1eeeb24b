"""
Plaintext private key file for the identity module.
"""
import os
import re
import stat
import logging
from pathlib import Path
from typing import List, Optional

# Import portalocker for file locking
try:
    import portalocker
except ImportError:
    raise ImportError(
        "portalocker package is required for identity module. "
        "Install with: pip install portalocker"
    )

from ..exceptions import InvalidKeyError, KeyFileLockedError, MissingKeyFileError, NoKeysFoundError

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "privatekeys.txt"

_HEX_PREFIX = re.compile("0x", re.IGNORECASE)


def normalize_keys(raw_text: str) -> List[str]:
    """
    Turn key file contents into a list of private key strings.

    Blank lines are skipped. The first "0x" (any case) found in a line is
    removed wherever it sits, then the line is trimmed.

    Args:
        raw_text: Full text of the key file

    Returns:
        Keys in file order, duplicates included
    """
    keys = []
    for line in raw_text.split("\n"):
        # skip blank lines
        if line.strip() == "":
            continue
        keys.append(_HEX_PREFIX.sub("", line, count=1).strip())
    return keys


class KeyFile:
    """Read-only, line-delimited file of hex private keys"""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the key file.

        Args:
            path: Optional custom path for the key file
        """
        # Use NFT_TRANSFER_KEY_FILE env var or default to ./privatekeys.txt
        if path:
            self.path = Path(path)
        else:
            self.path = Path(os.environ.get("NFT_TRANSFER_KEY_FILE", DEFAULT_KEY_FILE))

    def _check_permissions(self):
        """Warn when the key file is readable by other users (Unix/Linux/Mac only)"""
        if os.name != 'posix':
            return
        mode = self.path.stat().st_mode
        if mode & (stat.S_IRWXG | stat.S_IRWXO):
            logger.warning(
                "Key file %s is accessible by other users; consider chmod 600", self.path
            )

    def read(self) -> str:
        """
        Read the key file under a shared lock.

        Returns:
            Raw file contents

        Raises:
            MissingKeyFileError: If the file cannot be read
            KeyFileLockedError: If another process holds an exclusive lock
            InvalidKeyError: If the file is not UTF-8 text
        """
        try:
            with portalocker.Lock(
                str(self.path),
                mode='r',
                encoding='utf-8',
                timeout=10,
                flags=portalocker.LockFlags.SHARED | portalocker.LockFlags.NON_BLOCKING,
            ) as f:
                data = f.read()
            self._check_permissions()
        except portalocker.LockException as e:
            logger.error(f"Key file {self.path} is locked: {e}")
            raise KeyFileLockedError(
                f"Key file {self.path} is locked by another process", path=str(self.path)
            ) from e
        except UnicodeDecodeError as e:
            logger.error(f"Key file {self.path} is not UTF-8 text: {e.reason}")
            raise InvalidKeyError(f"Key file {self.path} is not valid UTF-8 text") from e
        except OSError as e:
            logger.error(f"Unable to read key file {self.path}: {e}")
            raise MissingKeyFileError("Missing key file!", path=str(self.path)) from e
        return data

    def load_keys(self) -> List[str]:
        """
        Read and normalize all keys in the file.

        Raises:
            MissingKeyFileError: If the file cannot be read
            NoKeysFoundError: If the file has no non-blank lines
        """
        keys = normalize_keys(self.read())
        if not keys:
            raise NoKeysFoundError("No keys in key file! Exiting.")
        logger.debug("Loaded %d key(s) from %s", len(keys), self.path)
        return keys
