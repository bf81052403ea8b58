"""TOML configuration loader for FridgeAI."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class CameraConfig:
    index: int = 0
    save_dir: str = "/tmp/fridgeai"


@dataclass
class OpenAIVisionConfig:
    api_key: str = ""
    model: str = "gpt-4o-mini"
    detail: str = "low"  # low | high | auto


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class VisionConfig:
    backend: str = "openai"
    max_tokens: int = 500
    timeout: float = 60.0  # seconds
    openai: OpenAIVisionConfig = field(default_factory=OpenAIVisionConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)


@dataclass
class HistoryConfig:
    db_path: str = "~/.config/fridgeai/history.db"
    key: str = "scanHistory"


@dataclass
class FridgeAIConfig:
    camera: CameraConfig = field(default_factory=CameraConfig)
    vision: VisionConfig = field(default_factory=VisionConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)


def load_config(path: str | Path | None = None) -> FridgeAIConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    cam = raw.get("camera", {})
    vis = raw.get("vision", {})
    hst = raw.get("history", {})

    openai_cfg = vis.get("openai", {})
    claude_cfg = vis.get("claude", {})
    gemini_cfg = vis.get("gemini", {})

    # Resolve API keys: config file → environment variable
    openai_api_key = openai_cfg.get("api_key", "") or os.environ.get(
        "OPENAI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    return FridgeAIConfig(
        camera=CameraConfig(
            index=cam.get("index", 0),
            save_dir=cam.get("save_dir", "/tmp/fridgeai"),
        ),
        vision=VisionConfig(
            backend=vis.get("backend", "openai"),
            max_tokens=vis.get("max_tokens", 500),
            timeout=float(vis.get("timeout", 60.0)),
            openai=OpenAIVisionConfig(
                api_key=openai_api_key,
                model=openai_cfg.get("model", "gpt-4o-mini"),
                detail=openai_cfg.get("detail", "low"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        history=HistoryConfig(
            db_path=hst.get("db_path", "~/.config/fridgeai/history.db"),
            key=hst.get("key", "scanHistory"),
        ),
    )
