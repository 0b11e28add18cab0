import os
import datetime
import threading
import traceback

# Setup paths
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LOGS_DIR = os.path.join(ROOT_DIR, "Logs")

LOG_FILE = os.path.join(LOGS_DIR, "study.log")

_WRITE_LOCK = threading.Lock()


class Logger:
    # Shared by all request handler threads
    log_file = LOG_FILE

    @staticmethod
    def configure(log_file):
        """Point the logger at another file (settings or tests)."""
        if log_file:
            Logger.log_file = os.path.abspath(log_file)

    @staticmethod
    def _write(level, message):
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{timestamp}] {level.upper()}: {message}\n"

        # Write to file; a broken log must never break a request
        try:
            with _WRITE_LOCK:
                os.makedirs(os.path.dirname(Logger.log_file), exist_ok=True)
                with open(Logger.log_file, "a", encoding="utf-8") as f:
                    f.write(line)
        except OSError:
            pass

    @staticmethod
    def info(message):
        Logger._write("INFO", message)

    @staticmethod
    def warn(message):
        Logger._write("WARN", message)

    @staticmethod
    def error(message, exc=None):
        Logger._write("ERROR", message)
        if exc:
            tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            Logger._write("ERROR", f"Traceback:\n{tb}")

    @staticmethod
    def debug(message):
        Logger._write("DEBUG", message)
