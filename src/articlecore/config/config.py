"""
Configuration management for ArticleCore using Pydantic.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Literal, cast

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Nested Configuration Models ---


class ExtractionSettings(BaseModel):
    """Tunable heuristics for content scoring, boilerplate removal and titles."""

    parser: Literal["lxml", "html.parser", "html5lib"] = Field(
        default="lxml", description="BeautifulSoup tree builder used to parse documents."
    )

    # Scoring
    min_text_length: int = Field(default=25, ge=0, description="Minimum own-text length for a block to score.")
    cjk_min_text_length: int = Field(default=10, ge=0, description="Minimum own-text length for CJK blocks.")
    base_score: float = Field(default=1.0, description="Constant every scoring block starts with.")
    chars_per_point: int = Field(default=100, gt=0, description="Characters of text worth one point.")
    max_length_bonus: float = Field(default=3.0, ge=0, description="Cap on the text-length bonus.")
    cjk_chars_per_point: int = Field(default=30, gt=0, description="CJK characters worth one point.")
    cjk_max_length_bonus: float = Field(default=5.0, ge=0, description="Cap on the CJK text-length bonus.")
    cjk_ratio_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Share of CJK characters above which text is scored as CJK."
    )
    grandparent_weight: float = Field(default=0.5, ge=0.0, le=1.0, description="Share of a score credited upward twice.")
    keyword_weight: float = Field(default=25.0, ge=0, description="Bonus/penalty for class and id keyword matches.")
    min_candidate_score: float = Field(
        default=5.0, description="Best candidate must reach this score, otherwise <body> is used."
    )
    tag_weights: Dict[str, float] = Field(
        default_factory=lambda: {
            "div": 5.0,
            "article": 5.0,
            "main": 5.0,
            "section": 3.0,
            "pre": 3.0,
            "td": 3.0,
            "blockquote": 3.0,
            "ol": -3.0,
            "ul": -3.0,
            "li": -3.0,
            "dl": -3.0,
            "dd": -3.0,
            "dt": -3.0,
            "form": -3.0,
            "address": -3.0,
            "h1": -5.0,
            "h2": -5.0,
            "h3": -5.0,
            "h4": -5.0,
            "h5": -5.0,
            "h6": -5.0,
            "th": -5.0,
        },
        description="Readability-style weights added to a candidate by tag name.",
    )
    positive_keywords: List[str] = Field(
        default=["article", "content", "main", "story", "post", "body", "entry", "chapter", "hentry"],
        description="Class/id tokens that suggest article content.",
    )
    negative_keywords: List[str] = Field(
        default=[
            "nav",
            "sidebar",
            "footer",
            "comment",
            "related",
            "share",
            "sharing",
            "social",
            "ad",
            "ads",
            "advert",
            "sponsor",
            "promo",
            "widget",
            "menu",
            "breadcrumb",
            "masthead",
            "newsletter",
            "subscribe",
            "signup",
            "popup",
            "cookie",
            "outbrain",
            "taboola",
            "disqus",
            "pagination",
            "recommend",
        ],
        description="Class/id tokens that suggest boilerplate.",
    )

    # Cleaning
    max_link_density: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Containers with more anchor text than this share are removed."
    )
    protected_text_ratio: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Mixed-signal elements holding this share of the root text survive keyword removal.",
    )

    # Titles
    title_meta_fields: List[str] = Field(
        default=["og:title", "twitter:title"], description="Head meta fields consulted for the title, in order."
    )
    title_separators: List[str] = Field(
        default=[" | ", " — ", " – "], description="Separators after which a site-name suffix may be stripped."
    )
    max_site_suffix_words: int = Field(default=4, ge=1, description="Longest site-name suffix stripped from titles.")

    @field_validator("positive_keywords", "negative_keywords")
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        """Lower-case keywords and reject empty lists."""
        keywords = [k.strip().lower() for k in v if k and k.strip()]
        if not keywords:
            raise ValueError("keyword lists must contain at least one keyword")
        return keywords


class MonitoringConfig(BaseModel):
    """Logging output for the library and the CLI."""

    log_level: str = Field(default="INFO", description="Root log level: DEBUG, INFO, WARNING, ERROR or CRITICAL.")
    log_file: str | None = Field(default=None, description="Write JSON log lines here instead of the console.")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def ensure_log_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        log_path = Path(v)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return str(log_path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    """Top-level settings; environment variables use the ARTICLECORE_ prefix."""

    project_name: str = "ArticleCore"
    version: str = "0.1.0"
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    model_config = SettingsConfigDict(env_prefix="ARTICLECORE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Build a Config from a YAML mapping; an empty file means defaults."""
        if not path.is_file():
            raise FileNotFoundError(f"No configuration file at {path}")
        log.debug("Reading configuration from %s", path)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if data is None:
            log.warning("Configuration file %s is empty; using defaults", path)
            data = {}
        return cls.model_validate(data)


CONFIG_FILE_NAMES = ("config.yaml", "config.yml", "config.example.yaml")


def find_config_file() -> Path | None:
    """Return the first config file in the working directory, if any."""
    cwd = Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate
    return None


# --- Lazy Configuration Loader ---


class LazyConfig:
    """Proxy that loads the Config on first attribute access.

    A broken config file is logged and replaced by defaults, so importing
    the package never fails on configuration.
    """

    _config: ClassVar[Config | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __getattr__(self, name: str) -> Any:
        cls = self.__class__
        if cls._config is None:
            with cls._lock:
                if cls._config is None:
                    cls._config = self._load()
        return getattr(cls._config, name)

    @staticmethod
    def _load() -> Config:
        path = find_config_file()
        if path is None:
            log.debug("No configuration file found; using defaults")
            return Config()
        try:
            return Config.from_yaml(path)
        except (ValidationError, FileNotFoundError, yaml.YAMLError) as e:
            log.error("Ignoring invalid configuration file %s: %s", path, e)
            return Config()


# Typed as Config for type checkers; the actual instance is the LazyConfig proxy.
settings: "Config" = cast("Config", LazyConfig())
