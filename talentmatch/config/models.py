"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ScoringPolicy(str, Enum):
    """How a match rate is derived from keyword overlap.

    One policy applies to every record of a deployment.
    """

    TIERED = "tiered"
    FLAT = "flat"


class RankingView(str, Enum):
    """Which ranked results are kept for display."""

    ACTIVE = "active"  # match_rate > 0
    QUALIFIED = "qualified"  # match_rate > 0 and all required met
    ALL = "all"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class MatchingConfig(BaseModel):
    """Scoring policy and its constants."""

    policy: ScoringPolicy = Field(
        ScoringPolicy.TIERED, description="Scoring policy (tiered or flat)"
    )
    pass_floor: float = Field(
        50.0,
        ge=0,
        le=100,
        description="Score granted once every required keyword is met",
    )
    partial_ceiling: float = Field(
        30.0,
        ge=0,
        le=100,
        description="Maximum score while required keywords are still missing",
    )
    default_priority: str = Field(
        "preferred", description="Tier assigned by a plain toggle (required or preferred)"
    )
    strict_keywords: bool = Field(
        True, description="Reject selections of keywords missing from the catalog"
    )

    @model_validator(mode="after")
    def validate_scoring_constants(self):
        """Keep partial credit strictly below the pass floor."""
        if self.partial_ceiling >= self.pass_floor:
            raise ValueError(
                f"partial_ceiling ({self.partial_ceiling}) must be lower than "
                f"pass_floor ({self.pass_floor})"
            )
        if self.default_priority not in ("required", "preferred"):
            raise ValueError(
                f"default_priority must be 'required' or 'preferred', got: {self.default_priority}"
            )
        return self

    model_config = {"use_enum_values": True}


class RankingConfig(BaseModel):
    """Filtering and tier thresholds applied after scoring."""

    view: RankingView = Field(RankingView.ACTIVE, description="Default ranked view")
    fast_track_threshold: int = Field(
        80, ge=0, le=100, description="Minimum rate for the fast-track tier"
    )
    high_match_threshold: int = Field(
        80, ge=0, le=100, description="Minimum rate counted as a high match"
    )
    good_match_threshold: int = Field(
        50, ge=0, le=100, description="Minimum rate counted as a good match"
    )

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.good_match_threshold > self.high_match_threshold:
            raise ValueError(
                "good_match_threshold cannot be greater than high_match_threshold"
            )
        return self

    model_config = {"use_enum_values": True}


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the matching service."""

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
