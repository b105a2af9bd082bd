import logging
import os
from datetime import datetime
from scanstation.config.settings import PathConfig

def setup_logging(level=logging.INFO, log_dir=None):
    """Configure logging for the scan station."""
    log_dir = log_dir or PathConfig.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(
        log_dir,
        f'scanstation_{datetime.now().strftime("%Y%m%d")}.log'
    )

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )

    return logging.getLogger("scanstation")
