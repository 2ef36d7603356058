import logging
import os
import sys

config = {
    "dtype": os.environ.get("NDGRAD_DTYPE", "float32"),  # dtype for data built from python literals
    "log_level": os.environ.get("NDGRAD_LOG_LEVEL", "WARNING"),
}


# Configure logging
def setup_logger(log_level=None, log_file=None):
    log_level_dict = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    log_level = log_level or config["log_level"]
    level = log_level_dict.get(log_level.upper(), logging.WARNING)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        # Create log directory if it doesn't exist
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    # Configure logging to console and optionally to file
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )
    logger = logging.getLogger('ndgrad')
    logger.setLevel(level)
    return logger
