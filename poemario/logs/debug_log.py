import logging
import sys
import os
import json
import inspect
import time
from pathlib import Path
from functools import wraps
import traceback

# Директория для логов: LOG_DIR из окружения или каталог модуля
log_dir = Path(os.getenv("LOG_DIR", Path(__file__).parent))
log_dir.mkdir(parents=True, exist_ok=True)

# Константы для цветного вывода
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
PURPLE = '\033[95m'
CYAN = '\033[96m'
BOLD = '\033[1m'
END = '\033[0m'

# Сколько символов результата функции попадает в лог
RESULT_PREVIEW_LIMIT = 1000


def format_object(obj):
    """Форматирование объектов для вывода в лог"""
    if isinstance(obj, (list, dict, tuple, set)):
        try:
            return json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(obj)
    if hasattr(obj, '__dict__'):
        return str({k: v for k, v in obj.__dict__.items() if not k.startswith('_')})
    return str(obj)


class DebugLogger:
    """Расширенный логгер для дебага с подробной информацией и цветным выводом"""

    def __init__(self, name="poemario.debug", level=logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Очищаем handlers если они уже были добавлены
        if self.logger.handlers:
            self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
        )

        file_handler = logging.FileHandler(log_dir / "debug.log", encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        # В консоль без DEBUG, чтобы не засорять вывод uvicorn
        console_handler.setLevel(logging.INFO)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def debug(self, message, *args, **kwargs):
        """Дебаг лог с информацией о вызывающем коде"""
        frame = inspect.currentframe().f_back
        filename = frame.f_code.co_filename
        lineno = frame.f_lineno
        function = frame.f_code.co_name

        # Относительный путь внутри пакета
        if "poemario" in filename:
            filename = filename[filename.index("poemario"):]

        caller_info = f"{BLUE}[{filename}:{lineno} - {function}]{END}"
        self.logger.debug(f"{caller_info} {message}", *args, **kwargs)

    def info(self, message, *args, **kwargs):
        self.logger.info(f"{GREEN}{message}{END}", *args, **kwargs)

    def warning(self, message, *args, **kwargs):
        self.logger.warning(f"{YELLOW}{message}{END}", *args, **kwargs)

    def error(self, message, *args, **kwargs):
        """Лог ошибок с трейсом текущего исключения"""
        trace = traceback.format_exc()
        if trace and trace != 'NoneType: None\n':
            message = f"{message}\n{RED}Traceback:{END}\n{trace}"
        self.logger.error(f"{RED}{message}{END}", *args, **kwargs)

    def start_func(self, func_name, params=None):
        params_str = f" с параметрами: {format_object(params)}" if params else ""
        self.debug(f"{PURPLE}Начало выполнения функции {func_name}{END}{params_str}")

    def end_func(self, func_name, result=None, execution_time=None):
        result_str = ""
        if result is not None:
            formatted = format_object(result)
            result_str = f", результат: {formatted[:RESULT_PREVIEW_LIMIT]}"
            if len(formatted) > RESULT_PREVIEW_LIMIT:
                result_str += "... [обрезано]"

        time_str = f", время выполнения: {execution_time:.4f}с" if execution_time else ""
        self.debug(f"{PURPLE}Окончание выполнения функции {func_name}{END}{result_str}{time_str}")

    def log_exception(self, message="Произошло исключение"):
        """Логирование исключения с трейсом"""
        exc_type, exc_value, exc_traceback = sys.exc_info()
        if exc_type:
            tb_str = ''.join(traceback.format_exception(exc_type, exc_value, exc_traceback))
            self.logger.error(f"{RED}{message}: {exc_type.__name__}: {exc_value}\n{tb_str}{END}")
        else:
            self.error(message)

    def log_request(self, request, extra_info=None):
        """Логирование входящего HTTP запроса"""
        method = getattr(request, 'method', 'UNKNOWN')
        url = str(getattr(request, 'url', 'UNKNOWN'))
        client = getattr(request, 'client', None)
        client_host = client.host if client else "unknown"
        headers = dict(getattr(request, 'headers', {}))

        info = (
            f"{CYAN}HTTP запрос:{END} {method} {url}\n"
            f"{CYAN}Клиент:{END} {client_host}\n"
            f"{CYAN}Заголовки:{END} {json.dumps(headers, indent=2, ensure_ascii=False)}"
        )
        if extra_info:
            info += f"\n{CYAN}Дополнительно:{END} {extra_info}"

        self.debug(info)

    def log_response(self, response, process_time=None):
        """Логирование исходящего HTTP ответа"""
        status_code = getattr(response, 'status_code', 0)
        color = GREEN if 200 <= status_code < 400 else YELLOW if 400 <= status_code < 500 else RED

        info = f"{CYAN}HTTP ответ:{END} {color}Статус {status_code}{END}"
        if process_time is not None:
            info += f"\n{CYAN}Время обработки:{END} {process_time:.3f}с"

        self.debug(info)

    def log_data(self, name, data):
        self.debug(f"{CYAN}{name}:{END}\n{format_object(data)}")


def _call_arguments(func, args, kwargs):
    func_args = dict(zip(inspect.getfullargspec(func).args, args))
    func_args.update(kwargs)
    # Сессию БД, описание сущности и self/cls не логируем
    for skip in ('self', 'cls', 'db', 'schema'):
        func_args.pop(skip, None)
    return func_args


def log_function(logger=None):
    """Декоратор для логирования вызова функции (синхронной или корутины)"""
    if logger is None:
        logger = debug_logger

    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                logger.start_func(func.__name__, _call_arguments(func, args, kwargs))
                start_time = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    logger.log_exception(f"Ошибка в функции {func.__name__}")
                    raise
                logger.end_func(func.__name__, result, time.perf_counter() - start_time)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.start_func(func.__name__, _call_arguments(func, args, kwargs))
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.log_exception(f"Ошибка в функции {func.__name__}")
                raise
            logger.end_func(func.__name__, result, time.perf_counter() - start_time)
            return result

        return wrapper

    return decorator


# Глобальный экземпляр логгера для дебага
debug_logger = DebugLogger()
