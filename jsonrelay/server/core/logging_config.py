import os

from jsonrelay.common.core.logging_config import setup_logging as common_setup_logging

from ..config import ServerConfig


def setup_logging(config: ServerConfig):
    """
    Load the YAML config and initialize logging.

    ``LOG_CONFIG_PATH`` is resolved against ``ROOT`` when relative.
    """
    config_path = config.LOG_CONFIG_PATH
    if not os.path.isabs(config_path):
        config_path = os.path.join(config.ROOT, config_path)
    common_setup_logging(config_path, level=config.LOG_LEVEL)
