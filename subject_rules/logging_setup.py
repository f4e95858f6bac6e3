import os
import logging
from typing import Optional

from rich.logging import RichHandler

from subject_rules.config import ENV_PREFIX, VALID_LOG_LEVELS, SubjectRulesConfig
from subject_rules.exceptions import ConfigurationError


def resolve_log_level(level: Optional[str] = None, config: Optional[SubjectRulesConfig] = None) -> str:
    """
    Pick the log level: explicit argument, then config, then environment, then INFO.
    """
    if level:
        chosen = level
    elif config is not None:
        chosen = config.system.log_level
    else:
        chosen = os.getenv(f"{ENV_PREFIX}LOG_LEVEL") or "INFO"

    chosen = chosen.upper()
    if chosen not in VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level: {chosen}",
            component="logging_setup",
            context={"valid_levels": list(VALID_LOG_LEVELS)}
        )
    return chosen


def setup_logging(level: Optional[str] = None, config: Optional[SubjectRulesConfig] = None) -> RichHandler:
    """
    Route root logging through a single RichHandler.

    Calling again swaps the previous RichHandler; other handlers stay.
    """
    level = resolve_log_level(level, config)

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)
    root.setLevel(level)

    handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    handler.setLevel(level)

    # RichHandler renders time/level itself
    handler.setFormatter(logging.Formatter("%(message)s"))

    root.addHandler(handler)
    return handler
