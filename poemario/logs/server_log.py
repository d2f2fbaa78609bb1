import logging
import sys
import os
from pathlib import Path

# Директория для логов: LOG_DIR из окружения или каталог модуля
log_dir = Path(os.getenv("LOG_DIR", Path(__file__).parent))
log_dir.mkdir(parents=True, exist_ok=True)


# Настраиваем логирование в файл и консоль
def setup_logging(name: str = "poemario.api", filename: str = "api_requests.log") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Повторный импорт не должен дублировать обработчики
    if logger.handlers:
        return logger

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    file_handler = logging.FileHandler(log_dir / filename, encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


# Создаем экземпляр логгера
api_logger = setup_logging()
