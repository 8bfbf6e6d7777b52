#!/usr/bin/env python3
"""
Configuration for Elenchos

Holds the thresholds and placeholder content used by the scan pipeline and
the bulk actions. Defaults reproduce the classic repository validator
behavior; the command line may override some of them.
"""

import argparse
from dataclasses import asdict, dataclass
from typing import Optional

DEFAULT_README_CONTENT = "# Empty-Readme" "This is an empty directory. Please Describe why this directory is needed."


@dataclass
class ElenchosConfig:
    """Configuration for Elenchos"""

    threshold_mb: float = 100.0
    git_marker: str = ".git"
    readme_name: str = "README.md"
    readme_content: str = DEFAULT_README_CONTENT

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ElenchosConfig":
        """Create from dictionary"""
        return cls(
            threshold_mb=float(data.get("threshold_mb", 100.0)),
            git_marker=data.get("git_marker", ".git"),
            readme_name=data.get("readme_name", "README.md"),
            readme_content=data.get("readme_content", DEFAULT_README_CONTENT),
        )

    @classmethod
    def from_args(cls, args: Optional[argparse.Namespace]) -> "ElenchosConfig":
        """Create from parsed command line arguments, keeping defaults for anything unset"""
        config = cls()
        if args is None:
            return config

        threshold = getattr(args, "threshold_mb", None)
        if threshold is not None:
            if threshold <= 0:
                raise ValueError("Threshold must be a positive number of megabytes")
            config.threshold_mb = float(threshold)
        return config

    @property
    def threshold_label(self) -> str:
        """Threshold formatted the way the scan summary shows it, e.g. '100mb'"""
        if float(self.threshold_mb).is_integer():
            return f"{int(self.threshold_mb)}mb"
        return f"{self.threshold_mb:g}mb"
