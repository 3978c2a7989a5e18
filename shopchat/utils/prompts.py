"""
Canned responses and LLM prompts, loaded once from YAML.
"""

import yaml
from pathlib import Path
from functools import lru_cache


@lru_cache(maxsize=1)
def load_prompts() -> dict:
    """
    Loads config/prompts.yaml and caches the parsed result.

    Returns:
        Dictionary with greeting/fallback pools, fixed messages,
        formatting templates and the responder system prompt

    Raises:
        FileNotFoundError: If prompts.yaml is not found
    """
    config_path = Path(__file__).parent.parent.parent / "config" / "prompts.yaml"
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)
