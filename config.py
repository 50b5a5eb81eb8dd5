"""Load .env and expose scraper config. Copy .env.example to .env and override values as needed."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

FETCH_STRATEGIES = ("browser", "http", "scrapfly")


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_scrapfly_api_key() -> str | None:
    """ScrapFly API key. Required only for FETCH_STRATEGY=scrapfly."""
    return os.environ.get("SCRAPFLY_API_KEY") or None


def get_fetch_strategy() -> str:
    """Page fetcher to use: browser (Playwright, default), http (plain GET) or scrapfly."""
    strategy = (os.environ.get("FETCH_STRATEGY") or "browser").strip().lower()
    if strategy not in FETCH_STRATEGIES:
        raise ValueError(f"FETCH_STRATEGY must be one of {', '.join(FETCH_STRATEGIES)}, got {strategy!r}")
    return strategy


def get_fetch_timeout_ms() -> int:
    """Timeout for one page fetch (navigation or HTTP request)."""
    return _get_int("FETCH_TIMEOUT_MS", 20000)


def get_settle_delay_ms() -> int:
    """Fixed wait after page load so deferred scripts can run. A heuristic, not a guarantee."""
    return _get_int("SETTLE_DELAY_MS", 1000)


def get_fetch_retries() -> int:
    """Attempts per URL for the plain HTTP fetcher."""
    return max(1, _get_int("FETCH_RETRIES", 3))


def get_item_timeout_seconds() -> int:
    """Hard deadline for fetch + extract of one detail page, retries included."""
    return _get_int("ITEM_TIMEOUT_SECONDS", 60)


def get_batch_timeout_seconds() -> int:
    """Deadline for the whole detail-page stage of one scrape."""
    return _get_int("BATCH_TIMEOUT_SECONDS", 300)


def get_log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()


def setup_logging() -> None:
    """Configure root logging once at process start (scripts, main)."""
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ---------- LangSmith tracing (pipeline graph) ----------


def get_langsmith_api_key() -> str | None:
    """LangSmith API key for tracing. EU: https://eu.smith.langchain.com | US: https://smith.langchain.com"""
    return os.environ.get("LANGCHAIN_API_KEY") or os.environ.get("LANGSMITH_API_KEY") or None


def get_langsmith_endpoint() -> str:
    """LangSmith API endpoint. Defaults to EU (eu.api.smith.langchain.com). US: https://api.smith.langchain.com"""
    return (
        os.environ.get("LANGCHAIN_ENDPOINT")
        or os.environ.get("LANGSMITH_ENDPOINT")
        or "https://eu.api.smith.langchain.com"
    )


def is_langsmith_tracing_enabled() -> bool:
    """True if LangSmith tracing is enabled via LANGCHAIN_TRACING_V2=true."""
    return os.environ.get("LANGCHAIN_TRACING_V2", "").lower() in ("true", "1", "yes")


def get_langsmith_project() -> str:
    """Project name for LangSmith traces (default: dfimoveis-map)."""
    return os.environ.get("LANGCHAIN_PROJECT") or os.environ.get("LANGCHAIN_PROJECT_NAME") or "dfimoveis-map"


def setup_langsmith_tracing() -> None:
    """
    Call once at startup (before building the pipeline graph) so scrape runs are traced.
    Only enables tracing when an API key is present; otherwise leaves the environment untouched.
    """
    load_dotenv()
    if not get_langsmith_api_key():
        return
    if not is_langsmith_tracing_enabled():
        os.environ["LANGCHAIN_TRACING_V2"] = "true"
    if not os.environ.get("LANGCHAIN_ENDPOINT") and not os.environ.get("LANGSMITH_ENDPOINT"):
        os.environ["LANGCHAIN_ENDPOINT"] = get_langsmith_endpoint()
    if not os.environ.get("LANGCHAIN_PROJECT") and not os.environ.get("LANGCHAIN_PROJECT_NAME"):
        os.environ["LANGCHAIN_PROJECT"] = get_langsmith_project()
