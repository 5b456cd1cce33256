# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings for a single coverage run."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

KCOV_ENV: Final[str] = "KCOV"
CARGO_ENV: Final[str] = "CARGO"
COVERALLS_JOB_ENV: Final[str] = "TRAVIS_JOB_ID"
DEFAULT_KCOV: Final[str] = "kcov"
DEFAULT_CARGO: Final[str] = "cargo"
DEFAULT_OUTPUT_SUBDIR: Final[tuple[str, str]] = ("target", "cov")
MINIMUM_KCOV_VERSION: Final[int] = 30


class TargetSelection(BaseModel):
    """Cargo test targets and features to build and instrument."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lib: bool = False
    bins: tuple[str, ...] = ()
    tests: tuple[str, ...] = ()
    features: str | None = None
    no_default_features: bool = False

    def cargo_args(self) -> list[str]:
        """Return the ``cargo test`` arguments selecting these targets.

        Returns:
            list[str]: Arguments in cargo's command-line order.
        """

        args: list[str] = []
        if self.lib:
            args.append("--lib")
        for name in self.bins:
            args.extend(("--bin", name))
        for name in self.tests:
            args.extend(("--test", name))
        if self.features:
            args.extend(("--features", self.features))
        if self.no_default_features:
            args.append("--no-default-features")
        return args


class KcovSettings(BaseModel):
    """Resolved options for one ``cargo kcov`` invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kcov: str = DEFAULT_KCOV
    cargo: str = DEFAULT_CARGO
    manifest_path: Path | None = None
    output: Path | None = None
    targets: TargetSelection = Field(default_factory=TargetSelection)
    coveralls: bool = False
    clean_rebuild: bool = True
    verbose: bool = False
    use_color: bool | None = None

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None, **overrides: object) -> KcovSettings:
        """Build settings using ``KCOV``/``CARGO`` from ``env`` as executable defaults.

        Args:
            env: Environment mapping; defaults to :data:`os.environ`.
            **overrides: Field values taking precedence over the environment.
                ``None`` values are ignored.

        Returns:
            KcovSettings: Validated settings.
        """

        env = os.environ if env is None else env
        values: dict[str, object] = {}
        if env.get(KCOV_ENV):
            values["kcov"] = env[KCOV_ENV]
        if env.get(CARGO_ENV):
            values["cargo"] = env[CARGO_ENV]
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)

    @property
    def project_root(self) -> Path:
        """Return the directory holding ``Cargo.toml``."""

        if self.manifest_path is not None:
            return self.manifest_path.resolve().parent
        return Path.cwd()

    @property
    def output_dir(self) -> Path:
        """Return the absolute directory receiving kcov reports."""

        if self.output is not None:
            return self.output.resolve()
        return self.project_root.joinpath(*DEFAULT_OUTPUT_SUBDIR)

    def cargo_base_args(self) -> list[str]:
        """Return arguments shared by every cargo invocation (manifest selection).

        Returns:
            list[str]: Absolute ``--manifest-path`` arguments when a manifest was given.
        """

        if self.manifest_path is None:
            return []
        return ["--manifest-path", str(self.manifest_path.resolve())]


__all__ = [
    "CARGO_ENV",
    "COVERALLS_JOB_ENV",
    "KCOV_ENV",
    "MINIMUM_KCOV_VERSION",
    "KcovSettings",
    "TargetSelection",
]
