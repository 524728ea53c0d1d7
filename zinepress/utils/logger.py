# -*- coding: utf-8 -*-
# utils/logger.py
import logging
import os
from datetime import datetime
from typing import Optional


def setup_logging(log_dir: Optional[str] = "logs", level: int = logging.INFO):
    """Настройка логирования"""
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"zinepress_{datetime.now().strftime('%Y%m%d')}.log")
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    # Уменьшаем логирование для некоторых библиотек
    logging.getLogger('PIL').setLevel(logging.WARNING)
    logging.getLogger('reportlab').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    return logging.getLogger('zinepress')
