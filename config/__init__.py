from .localization import LOCALIZATION_CONFIG, get_localization_config
from .logging import get_logging_config

__all__ = ["LOCALIZATION_CONFIG", "get_localization_config", "get_logging_config"]
