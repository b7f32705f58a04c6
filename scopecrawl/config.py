import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")


_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_optional_int_env(name: str) -> Optional[int]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return None


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_bool_env(name: str, default: bool) -> bool:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	value = raw.strip().lower()
	if value in _TRUTHY:
		return True
	if value in _FALSY:
		return False
	logging.warning("Invalid %s: %r (expected a boolean)", name, raw)
	return default


USER_AGENT = get_str_env("USER_AGENT", "Mozilla/5.0 (compatible; ScopeCrawl/1.0)")
HTTP_TIMEOUT = get_int_env("HTTP_TIMEOUT", 10)
CRAWL_DELAY = get_float_env("CRAWL_DELAY", 0.1)
DEFAULT_DEPTH = get_int_env("DEFAULT_DEPTH", 1)
RESPECT_ROBOTS = get_bool_env("SCOPECRAWL_RESPECT_ROBOTS", True)
