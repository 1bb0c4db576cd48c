"""
Prompt Library Loader

The Indonesian prompt templates behind report narratives, class analysis,
talent counseling and exam generation ship as ``prompts.json`` inside the
package. They are read once and served by prompt id.

Templates use ``{{name}}`` placeholders. Context values are rendered as
prompt text: assessment types by their Indonesian name, lists comma-joined,
category scores as ``Kategori: skor`` pairs.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from gurupintar.config import settings

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")

# Generation settings by prompt category; values on the prompt itself win
CATEGORY_DEFAULTS: dict[str, dict[str, Any]] = {
    "report": {"temperature": 0.7, "max_tokens": 512},
    "analysis": {"temperature": 0.7, "max_tokens": 1024},
    "counseling": {"temperature": 0.7, "max_tokens": 1024},
    "exam": {"temperature": 0.8, "max_tokens": 4096},
}
GENERATION_DEFAULTS: dict[str, Any] = {"temperature": 0.7, "max_tokens": 1024}


def format_context_value(value: Any) -> str:
    """Render one context value as prompt text."""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    if isinstance(value, Mapping):
        return ", ".join(f"{key}: {format_context_value(v)}" for key, v in value.items())
    if isinstance(value, list | tuple):
        return ", ".join(format_context_value(item) for item in value)
    return str(value)


class PromptLibrary:
    """In-memory prompt library loaded from JSON."""

    def __init__(self, prompt_library_path: Path | None = None):
        self.path = prompt_library_path or settings.prompt_library_path
        self.prompts: dict[str, dict[str, Any]] = {}
        self.metadata: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            raise FileNotFoundError(
                f"Prompt library not found: {self.path}\n"
                f"Check PROMPT_LIBRARY_PATH or reinstall the package."
            )

        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)

        prompts = data.get("prompts", [])
        self.metadata = {
            "version": data.get("version", "unknown"),
            "last_updated": data.get("last_updated"),
            "total_prompts": len(prompts),
        }
        self.prompts = {prompt["prompt_id"]: prompt for prompt in prompts}

    def get_prompt(self, prompt_id: str) -> dict[str, Any]:
        """Get prompt by ID (e.g. ``REPORT-001``, ``EXAM-001``).

        Raises:
            KeyError: If prompt_id not found
        """
        if prompt_id not in self.prompts:
            available = ", ".join(sorted(self.prompts.keys()))
            raise KeyError(
                f"Prompt '{prompt_id}' not found in library.\nAvailable prompts: {available}"
            )

        return self.prompts[prompt_id]

    def get_system_prompt(self, prompt_id: str) -> str:
        return str(self.get_prompt(prompt_id)["system_prompt"])

    def get_user_template(self, prompt_id: str) -> str | None:
        return self.get_prompt(prompt_id).get("user_template")

    def placeholders(self, prompt_id: str) -> list[str]:
        """Placeholder names used by the prompt's user template, in order of appearance."""
        template = self.get_user_template(prompt_id) or ""
        return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))

    def render_user_message(self, prompt_id: str, context: Mapping[str, Any]) -> str:
        """
        Fill the user template from ``context``.

        Keys the template does not use are ignored.

        Raises:
            KeyError: If the template uses a placeholder missing from ``context``
        """
        missing = [name for name in self.placeholders(prompt_id) if name not in context]
        if missing:
            raise KeyError(f"Prompt '{prompt_id}' is missing context: {', '.join(missing)}")

        template = self.get_user_template(prompt_id) or ""
        return PLACEHOLDER_PATTERN.sub(
            lambda match: format_context_value(context[match.group(1)]), template
        )

    def list_prompts(self, category: str | None = None) -> list[str]:
        if category is None:
            return sorted(self.prompts.keys())

        return sorted(
            prompt_id
            for prompt_id, prompt in self.prompts.items()
            if prompt.get("category") == category
        )

    def get_prompt_config(self, prompt_id: str) -> dict[str, Any]:
        """Model, temperature and max_tokens: prompt value, else category default."""
        prompt = self.get_prompt(prompt_id)
        defaults = CATEGORY_DEFAULTS.get(prompt.get("category", ""), GENERATION_DEFAULTS)
        return {
            "model": prompt.get("model", settings.AI_MODEL),
            "temperature": prompt.get("temperature", defaults["temperature"]),
            "max_tokens": prompt.get("max_tokens", defaults["max_tokens"]),
        }

    def __len__(self) -> int:
        return len(self.prompts)

    def __contains__(self, prompt_id: str) -> bool:
        return prompt_id in self.prompts

    def __repr__(self) -> str:
        return f"PromptLibrary(version={self.metadata['version']}, prompts={len(self.prompts)})"


_prompt_library: PromptLibrary | None = None


def get_prompt_library(force_reload: bool = False) -> PromptLibrary:
    global _prompt_library

    if _prompt_library is None or force_reload:
        _prompt_library = PromptLibrary()

    return _prompt_library
