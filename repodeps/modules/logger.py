import os
import sys
import datetime
import threading
import json

from repodeps.modules.config import config

DEFAULT_LOG_FILE = os.path.expanduser("~/.local/state/repodeps/repodeps.log")

LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "SUCCESS": 25,
    "WARNING": 30,
    "ERROR": 40,
}

ANSI = {
    "DEBUG": "\033[90m",
    "INFO": "\033[94m",
    "SUCCESS": "\033[92m",
    "WARNING": "\033[93m",
    "ERROR": "\033[91m",
}
ANSI_RESET = "\033[0m"


class LogFile:
    """Arquivo de log com rotação simples por tamanho (um backup, '.1')."""

    def __init__(self, path, max_kb):
        self.path = path
        self.max_bytes = max_kb * 1024
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
        except OSError as e:
            print(f"Logger: falha ao criar diretório de log {os.path.dirname(path)}: {e}", file=sys.stderr)

    def _rotate(self):
        if self.max_bytes <= 0 or not os.path.exists(self.path):
            return
        if os.path.getsize(self.path) <= self.max_bytes:
            return
        try:
            os.replace(self.path, self.path + ".1")
        except OSError as e:
            print(f"Logger: erro ao rotacionar log {self.path}: {e}", file=sys.stderr)

    def write(self, line):
        self._rotate()
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            print(f"Logger: falha ao escrever no arquivo de log {self.path}: {e}", file=sys.stderr)


class Logger:
    # um lock por processo: vários Logger podem apontar para o mesmo arquivo
    _lock = threading.Lock()

    def __init__(self, name="repodeps"):
        self.name = name
        self.use_utc = config.getboolean("logging", "timestamp_utc", fallback=False)
        self.as_json = config.get("logging", "log_format", fallback="text").lower() == "json"
        self.colored = config.getboolean("logging", "color_output", fallback=True) and not self.as_json
        self.to_console = config.getboolean("logging", "log_to_console", fallback=True)
        self.console_level = LEVELS.get(config.get("logging", "level", fallback="warning").upper(), 30)

        self.file = None
        if config.getboolean("logging", "log_to_file", fallback=True):
            path = os.path.expanduser(config.get("logging", "log_file", fallback=DEFAULT_LOG_FILE))
            self.file = LogFile(path, config.getint("logging", "max_log_size_kb", fallback=1024))

    def _render(self, level, message):
        now = datetime.datetime.now(datetime.timezone.utc if self.use_utc else None)
        stamp = now.strftime("%Y-%m-%d %H:%M:%S")
        if self.as_json:
            return json.dumps({"timestamp": stamp, "logger": self.name, "level": level, "message": message})
        return f"[{stamp}] [{self.name}] [{level}] {message}"

    def log(self, level, message):
        level = level.upper()
        line = self._render(level, message)
        # o arquivo recebe tudo; stderr só a partir do nível configurado
        # (stdout pertence aos comandos)
        show = self.to_console and LEVELS.get(level, 0) >= self.console_level
        with self._lock:
            if self.file is not None:
                self.file.write(line)
            if show:
                if self.colored:
                    line = f"{ANSI.get(level, '')}{line}{ANSI_RESET}"
                print(line, file=sys.stderr)

    def debug(self, message):
        self.log("DEBUG", message)

    def info(self, message):
        self.log("INFO", message)

    def success(self, message):
        self.log("SUCCESS", message)

    def warning(self, message):
        self.log("WARNING", message)

    def error(self, message):
        self.log("ERROR", message)
