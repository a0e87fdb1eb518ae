from logging import getLogger
from typing import Mapping, Tuple

logger = getLogger(__name__)

DEFAULT_TAG_PREFIX = "TAG_"
MAX_TAGS = 50
MAX_KEY_LENGTH = 128
MAX_VALUE_LENGTH = 256
RESERVED_KEY_PREFIX = "aws:"


def extract_tags(
    environ: Mapping[str, str],
    prefix: str = DEFAULT_TAG_PREFIX,
) -> Tuple[Tuple[str, str], ...]:
    """Collect instance tags from ``<prefix><key>=<value>`` variables.

    Entries are visited in sorted order of the raw variable name, so when
    two variables normalise to the same tag key the lexicographically
    later one wins regardless of how the environment was enumerated.
    Blank values, oversized keys or values and keys in the reserved
    ``aws:`` namespace are dropped. At most 50 tags are returned.
    """
    seen: dict[str, str] = {}
    for raw_key in sorted(environ):
        if not raw_key.startswith(prefix):
            continue
        value = environ[raw_key].strip()
        if not value:
            continue
        key = raw_key[len(prefix) :].strip()
        if not key:
            logger.debug(f"Skipping {raw_key}: empty tag key")
            continue
        if len(key) > MAX_KEY_LENGTH:
            logger.debug(f"Skipping {raw_key}: key longer than {MAX_KEY_LENGTH}")
            continue
        if len(value) > MAX_VALUE_LENGTH:
            logger.debug(f"Skipping {raw_key}: value longer than {MAX_VALUE_LENGTH}")
            continue
        if key.lower().startswith(RESERVED_KEY_PREFIX):
            logger.debug(f"Skipping {raw_key}: reserved '{RESERVED_KEY_PREFIX}' prefix")
            continue
        seen[key] = value

    if len(seen) > MAX_TAGS:
        logger.warning(f"Found {len(seen)} tags, only the first {MAX_TAGS} are applied")
    return tuple(list(seen.items())[:MAX_TAGS])
