from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

CONFIG_FILENAME = "prmerge.yaml"


class ConfigError(Exception):
    pass


class GitHubConfig(BaseModel):
    api_url: str = "https://api.github.com"
    token: str = ""
    repo: str = ""


class MergeSettings(BaseModel):
    temp_branch_suffix: str = "-rebase"
    delete_source_branch: bool = True


class PrmergeConfig(BaseModel):
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    merge: MergeSettings = Field(default_factory=MergeSettings)
    config_dir: Path | None = None


class MergeOptions(BaseModel):
    """Per-run switches, fixed for the duration of one merge."""

    model_config = ConfigDict(frozen=True)

    override: bool = False
    verbose: bool = False
    assume_yes: bool = False
    temp_branch_suffix: str = "-rebase"
    delete_source_branch: bool = True

    @classmethod
    def from_config(
        cls,
        config: PrmergeConfig,
        *,
        override: bool = False,
        verbose: bool = False,
        assume_yes: bool = False,
    ) -> MergeOptions:
        return cls(
            override=override,
            verbose=verbose,
            assume_yes=assume_yes,
            temp_branch_suffix=config.merge.temp_branch_suffix,
            delete_source_branch=config.merge.delete_source_branch,
        )


def _find_config_file(start: Path | None = None) -> Path | None:
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(start: Path | None = None) -> PrmergeConfig:
    config_path = _find_config_file(start)

    if config_path is not None:
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f) or {}
            config = PrmergeConfig.model_validate(raw)
        except (yaml.YAMLError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}:\n{e}") from e
        config.config_dir = config_path.parent
    else:
        config = PrmergeConfig()

    token_env = os.environ.get("PRMERGE_GITHUB_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if token_env:
        config.github.token = token_env

    url_env = os.environ.get("PRMERGE_GITHUB_URL")
    if url_env:
        config.github.api_url = url_env

    return config
