"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, trifree.toml only contains overrides.
An empty (or absent) trifree.toml is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- trifree.toml sections ---


class AnalysisConfig(BaseModel):
    """[analysis] section."""

    model_config = {"frozen": True}

    enumeration: Literal["pruned", "naive"] = "pruned"
    verify_characterizations: bool = True


class CertifyConfig(BaseModel):
    """[certify] section.

    ``default_epsilon`` accepts a float or a fraction string such as ``"1/20"``.
    """

    model_config = {"frozen": True}

    default_epsilon: float | str = "1/100"
    refute: bool = True


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    max_triangles: int = Field(default=50, ge=0)


class TrifreeConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    certify: CertifyConfig = Field(default_factory=CertifyConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
