"""
ProfileStore: Load and validate candidate profiles from JSON/YAML files.
"""

import json
from pathlib import Path
from typing import Union

import yaml

from .profile_schema import CandidateProfile


class ProfileStore:
    """Loads and validates candidate profiles from storage."""

    def __init__(self, profile_path: Union[str, Path]):
        """
        Initialize ProfileStore with a path to profile file.

        Args:
            profile_path: Path to JSON or YAML file containing profile data
        """
        self.profile_path = Path(profile_path)
        if not self.profile_path.exists():
            raise FileNotFoundError(f"Profile file not found: {self.profile_path}")

    def load(self) -> CandidateProfile:
        """
        Load profile from file and validate with Pydantic.

        Raises:
            pydantic.ValidationError: If profile data doesn't match schema
            ValueError: If the file extension is not supported
        """
        suffix = self.profile_path.suffix.lower()

        if suffix == ".json":
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            raise ValueError(f"Unsupported file format: {suffix}. Use .json or .yaml")
        return CandidateProfile.model_validate(data or {})
