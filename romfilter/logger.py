"""
Minimal logging context for romfilter.
Single place to control all output: screen + file, with flush.
"""
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text

from romfilter.__version__ import __version__

_SCREEN_STYLES: tuple[tuple[str, str], ...] = (
    (r"^\[INFO\]", "cyan"),
    (r"^\[WARNING\]", "yellow"),
    (r"^\[ERROR\]", "red"),
    (r"^\[\d{2}:\d{2}:\d{2}\.\d{3}\] \[DEBUG\]", "grey50"),
    (r"\bSkipping\b", "yellow"),
    (r"\bFailed\b", "red"),
    (r"\bDownloaded\b", "green"),
    (r"\bSelected \d+ of \d+\b", "green"),
)


class RomfilterLogger:
    """Minimal logger: print to screen + file, always flush"""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False):
        self.log_file = log_file
        self._file_handle = None
        self._start_time = datetime.now()
        self.debug_mode = debug
        self._console = Console(highlight=False)
        self._status_width = 0
        self._pacing_note_hosts: set[str] = set()

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_file, 'w', buffering=1, encoding='utf-8')  # Line buffered, UTF-8

        welcome = f"({self._start_time.strftime('%H:%M:%S')}  Started romfilter {__version__})"
        self.log(welcome)

    def _screen_text(self, output: str) -> Text:
        # Never parse markup: filenames are full of brackets
        text = Text(output)
        for pattern, style in _SCREEN_STYLES:
            text.highlight_regex(pattern, style)
        return text

    def _clear_status(self) -> None:
        if self._status_width:
            print("\r" + " " * self._status_width + "\r", end="", flush=True)
            self._status_width = 0

    def log(self, msg: str, prefix: str = ""):
        """Log to screen and file"""
        output = f"{prefix}{msg}" if prefix else msg

        self._clear_status()
        self._console.print(self._screen_text(output))

        if self._file_handle:
            self._file_handle.write(output + "\n")
            self._file_handle.flush()
            os.fsync(self._file_handle.fileno())

    def status(self, msg: str):
        """Inline progress line, overwritten by the next status or log line (screen only)"""
        self._clear_status()
        print(f"\r{msg}", end="", flush=True)
        self._status_width = len(msg)

    def info(self, msg: str):
        """Info message"""
        self.log(msg)

    def warning(self, msg: str):
        """Warning message"""
        self.log(msg, "[WARNING] ")

    def error(self, msg: str):
        """Error message"""
        self.log(msg, "[ERROR] ")

    def debug(self, msg: str):
        """Debug message (only shown in debug mode)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(msg, f"[{timestamp}] [DEBUG] ")

    def http_wait(self, host: str, seconds: float):
        """Log request pacing, once per host"""
        _ = seconds
        host_key = host.lower()
        if host_key in self._pacing_note_hosts:
            return
        self._pacing_note_hosts.add(host_key)
        self.log(f"Request pacing active for {host_key}; requests are spaced out.", "[INFO] ")

    def http_wait_debug(self, host: str, seconds: float):
        """Log pacing wait details (debug mode only)."""
        self.debug(f"Request pacing detail: waiting {seconds:.3f}s before next request to {host}")

    def http_retry(self, host: str, attempt: int, max_attempts: int, delay: int):
        """Log HTTP retry"""
        self.log(f"{host} not responding. Retrying in {delay}s... (attempt {attempt}/{max_attempts})", "[WARNING] ")

    def http_failed(self, host: str, max_attempts: int):
        """Log HTTP failure"""
        self.log(f"{host} not responding after {max_attempts} attempts. Aborting.", "[ERROR] ")

    def http_request(self, method: str, url: str, params: Optional[dict] = None):
        """Log HTTP request (debug mode only)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(f"HTTP Request: {method} {url}", f"[{timestamp}] ")
            if params:
                self.log(f"  Params: {json.dumps(params, indent=2)}", f"[{timestamp}] ")

    def http_response(self, status: int, body: str, elapsed_ms: float):
        """Log HTTP response (debug mode only)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(f"HTTP Response ({elapsed_ms:.0f}ms): Status {status}, {len(body)} chars", f"[{timestamp}] ")

    def close(self):
        """Close file handle with goodbye message"""
        if self._file_handle:
            end_time = datetime.now()
            elapsed = end_time - self._start_time
            goodbye = f"({end_time.strftime('%H:%M:%S')}  Ended session, elapsed {elapsed.total_seconds():.1f}s)"
            self.log(goodbye)
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


# Global instance (set by the CLI)
_logger: Optional[RomfilterLogger] = None

def set_logger(logger: RomfilterLogger):
    """Set global logger instance"""
    global _logger
    _logger = logger

def get_logger() -> RomfilterLogger:
    """Get global logger instance"""
    global _logger
    if _logger is None:
        # Fallback: create stdout-only logger
        _logger = RomfilterLogger()
    return _logger

# Convenience functions
def log(msg: str):
    get_logger().log(msg)

def info(msg: str):
    get_logger().info(msg)

def warning(msg: str):
    get_logger().warning(msg)

def error(msg: str):
    get_logger().error(msg)

def debug(msg: str):
    get_logger().debug(msg)
