"""Configuration management for TapRunner."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

CONFIG_NAMES = ["taprunner.json", ".taprunner.json"]


class ProjectConfig(BaseModel):
    """Project identification."""

    name: str = Field(default="", description="Project name for identification")
    description: str = Field(default="", description="Brief description of the suite")


class HarnessConfig(BaseModel):
    """Test harness behaviour."""

    max_name_length: int = Field(default=1023, description="Longest test name kept; longer names are truncated")
    catch_assertions: bool = Field(default=True, description="Report AssertionError as a test failure")
    exit_code_limit: int = Field(default=254, description="Largest failure count the CLI returns as exit status")

    @field_validator("max_name_length")
    @classmethod
    def validate_name_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Name length must be at least 1")
        return v

    @field_validator("exit_code_limit")
    @classmethod
    def validate_exit_code_limit(cls, v: int) -> int:
        if not 1 <= v <= 254:
            raise ValueError("Exit code limit must be between 1 and 254")
        return v


class TapRunnerConfig(BaseModel):
    """Main configuration for TapRunner."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    harness: HarnessConfig = Field(default_factory=HarnessConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "TapRunnerConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "TapRunnerConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        current = start_dir.resolve()
        while True:
            for name in CONFIG_NAMES:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create taprunner.json or run 'taprunner init'"
        )

    @classmethod
    def load_or_default(cls, path: Optional[Path | str] = None) -> "TapRunnerConfig":
        """Load ``path`` if given, else search for a config, else use defaults."""
        if path:
            return cls.from_file(path)
        try:
            return cls.find_and_load()
        except FileNotFoundError:
            return get_default_config()

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def get_default_config() -> TapRunnerConfig:
    """Return a default configuration."""
    return TapRunnerConfig(project=ProjectConfig(name="my-project"))


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.project.description = "Brief description of your test suite"
    config.to_file(output_path)
    return output_path
