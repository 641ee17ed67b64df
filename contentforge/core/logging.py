import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 파이프라인 로그 채널 (모드 제작자가 읽는 스키마 로그)
PIPELINE_LOGGER = "contentforge.pipeline"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logging.getLogger(PIPELINE_LOGGER).addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_pipeline_logger() -> logging.Logger:
    return logging.getLogger(PIPELINE_LOGGER)
