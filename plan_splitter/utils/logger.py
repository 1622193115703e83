"""
Logging utilities for the survey plan splitter.
Provides console logging plus optional structured JSON log files.
"""

import json
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

# Configuration
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

# Extra record attributes copied into JSON log lines
CONTEXT_FIELDS = (
    'source_filename', 'project_id', 'reference', 'stage',
    'strategy', 'execution_time', 'plans_materialized', 'plans_failed',
)


class SegmentationFormatter(logging.Formatter):
    """JSON formatter carrying segmentation context fields"""

    def format(self, record):
        log_record = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_record[name] = getattr(record, name)

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False, default=str)


def setup_logging(
    app_name: str = "plan_splitter",
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    json_console: bool = False,
    max_bytes: int = MAX_LOG_SIZE,
    backup_count: int = BACKUP_COUNT,
) -> logging.Logger:
    """
    Set up logging for the plan splitter.

    Args:
        app_name: Name of the application logger (also the log file name)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for rotating JSON log files; console only if None
        json_console: Emit JSON on the console instead of plain text
        max_bytes: Rotate log files at this size
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers so repeated setup does not duplicate output
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, log_level.upper()))
    if json_console:
        console_handler.setFormatter(SegmentationFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / f"{app_name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(SegmentationFormatter())
        logger.addHandler(file_handler)

        performance_logger = logging.getLogger('performance')
        performance_logger.handlers.clear()
        performance_handler = logging.handlers.RotatingFileHandler(
            log_dir / "performance.log",
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        performance_handler.setLevel(logging.INFO)
        performance_handler.setFormatter(SegmentationFormatter())
        performance_logger.addHandler(performance_handler)

    logger.info(f"Logging initialized for {app_name} at level {log_level}")
    return logger


class SegmentationRunLogger:
    """Context manager for logging one segmentation run"""

    def __init__(self, logger: logging.Logger, source_filename: str, project_id: str):
        self.logger = logger
        self.source_filename = source_filename
        self.project_id = project_id
        self.start_time = None
        self.execution_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.info(
            f"Segmentation started: {self.source_filename}",
            extra={
                'source_filename': self.source_filename,
                'project_id': self.project_id,
                'stage': 'start'
            }
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.execution_time = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(
                f"Segmentation finished: {self.source_filename} "
                f"in {self.execution_time:.2f}s",
                extra={
                    'source_filename': self.source_filename,
                    'project_id': self.project_id,
                    'stage': 'done',
                    'execution_time': self.execution_time
                }
            )
            log_performance_metric(
                "segmentation_seconds",
                self.execution_time,
                "s",
                {'source_filename': self.source_filename}
            )
        else:
            self.logger.error(
                f"Segmentation failed: {self.source_filename}: {exc_val}",
                extra={
                    'source_filename': self.source_filename,
                    'project_id': self.project_id,
                    'stage': 'failed',
                    'execution_time': self.execution_time
                }
            )
        # Never suppress the exception
        return False


def log_performance_metric(metric_name: str, value: float, unit: str, context: Dict[str, Any] = None):
    """
    Log performance metrics.

    Args:
        metric_name: Name of the metric
        value: Metric value
        unit: Unit of measurement
        context: Additional context
    """
    performance_logger = logging.getLogger('performance')

    performance_logger.info(
        f"Performance metric: {metric_name}={value:.3f}{unit}",
        extra={
            'metric_name': metric_name,
            'value': value,
            'unit': unit,
            'context': context or {},
            'timestamp': datetime.now().isoformat()
        }
    )
