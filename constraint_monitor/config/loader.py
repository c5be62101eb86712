# constraint_monitor/config/loader.py
"""
Configuration Loader

Loads configuration from YAML files with code defaults as fallback.

Design principle:
- Code = truth (has all defaults)
- YAML = input parameters (optional)
- System works without YAML

Search order for the YAML file:
1. explicit path
2. $CONSTRAINT_MONITOR_CONFIG
3. ./.constraint-monitor.yaml
4. $CODING_REPO/.constraint-monitor.yaml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import yaml

from constraint_monitor.core.engine import ConstraintEngine
from constraint_monitor.core.rules import CompositeLoader, RuleRegistry, RuleSet, RuleSetLoader
from constraint_monitor.core.semantic import (
    CircuitBreaker,
    ModelRouter,
    SemanticCache,
    SemanticProvider,
    SemanticValidator,
    build_providers,
)
from constraint_monitor.infra.rulesets import DefaultsLoader, FileSystemLoader

from .modules import EnforcementConfig, SemanticConfig
from .validator import ConfigIssue, validate_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CONSTRAINT_MONITOR_CONFIG"
CODING_REPO_ENV_VAR = "CODING_REPO"
CONFIG_FILENAME = ".constraint-monitor.yaml"


def candidate_paths(config_path: Optional[Path] = None) -> List[Path]:
    if config_path:
        return [Path(config_path).expanduser()]
    paths = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path).expanduser())
    paths.append(Path.cwd() / CONFIG_FILENAME)
    coding_repo = os.environ.get(CODING_REPO_ENV_VAR)
    if coding_repo:
        paths.append(Path(coding_repo).expanduser() / CONFIG_FILENAME)
    return paths


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """First existing config file, or None (not an error)"""
    for path in candidate_paths(config_path):
        if path.is_file():
            return path
    if config_path:
        logger.warning(f"Config file not found: {config_path}; using defaults")
    return None


def _load_yaml(path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Load YAML file, return None if missing or unreadable (code defaults apply)"""
    if path is None:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config {path}: {e}; using defaults")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Config {path} is not a mapping; using defaults")
        return None
    return data


def _merge_config(default_instance, yaml_data: Any, config_class):
    """Merge a YAML section into a default config instance; unknown keys are ignored"""
    if not isinstance(yaml_data, dict):
        logger.warning(f"Ignoring non-mapping section for {config_class.__name__}")
        return default_instance

    merged = {**default_instance.__dict__, **yaml_data}

    if "blocking_levels" in merged:
        levels = merged["blocking_levels"]
        if isinstance(levels, str):
            levels = [levels]
        merged["blocking_levels"] = tuple(str(level).lower() for level in (levels or ()))

    unknown = set(yaml_data) - set(config_class.__dataclass_fields__)
    if unknown:
        logger.debug(f"Ignoring unknown {config_class.__name__} keys: {sorted(unknown)}")

    return config_class(**{k: v for k, v in merged.items() if k in config_class.__dataclass_fields__})


class MonitorConfig:
    """
    Unified constraint-monitor configuration.

    All fields have code defaults - YAML is optional.
    """

    def __init__(
        self,
        enforcement: Optional[EnforcementConfig] = None,
        semantic: Optional[SemanticConfig] = None,
        source_path: Optional[Path] = None,
    ):
        self.enforcement = enforcement or EnforcementConfig.default()
        self.semantic = semantic or SemanticConfig.default()
        self.source_path = source_path

    @classmethod
    def default(cls) -> "MonitorConfig":
        return cls()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "MonitorConfig":
        """
        Load configuration from YAML file.

        Returns:
            MonitorConfig instance (always has code defaults as fallback)
        """
        path = find_config_file(config_path)
        yaml_data = _load_yaml(path)
        if not yaml_data:
            return cls.default()

        config = cls(source_path=path)
        if "enforcement" in yaml_data:
            config.enforcement = _merge_config(config.enforcement, yaml_data["enforcement"], EnforcementConfig)
        if "semantic" in yaml_data:
            config.semantic = _merge_config(config.semantic, yaml_data["semantic"], SemanticConfig)
        logger.debug(f"Loaded configuration from {path}")
        return config

    def rules_loader(self) -> RuleSetLoader:
        """YAML constraints when the config file has them, else built-in defaults"""
        loaders: List[RuleSetLoader] = []
        if self.source_path:
            loaders.append(FileSystemLoader(self.source_path))
        loaders.append(DefaultsLoader())
        return CompositeLoader(loaders)

    def validate(self, ruleset: Optional[RuleSet] = None) -> List[ConfigIssue]:
        """Validate configuration for illegal/misleading combinations"""
        return validate_config(self.enforcement, self.semantic, ruleset)

    def build_validator(
        self,
        providers: Optional[Mapping[str, SemanticProvider]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> Optional[SemanticValidator]:
        """
        Semantic validator for this configuration (None when semantic is disabled).

        Args:
            providers: Provider instances; built from credentials when omitted
            clock: Monotonic clock for cache TTL and breaker timing
        """
        sem = self.semantic
        if not sem.enabled:
            return None
        if providers is None:
            providers = build_providers(sem.api_keys)
        clock_kwargs = {"clock": clock} if clock else {}
        try:
            return self._validator(providers, clock_kwargs)
        except (AttributeError, TypeError, ValueError) as e:
            # Semantic layer off; regex rules keep enforcing
            logger.error(f"Invalid semantic configuration, semantic checks disabled: {e}")
            return None

    def _validator(
        self,
        providers: Mapping[str, SemanticProvider],
        clock_kwargs: Dict[str, Any],
    ) -> SemanticValidator:
        sem = self.semantic
        return SemanticValidator(
            providers,
            router=ModelRouter(sem.model_routing),
            cache=SemanticCache(max_size=sem.cache_max_size, ttl_s=sem.cache_ttl_s, **clock_kwargs),
            breaker=CircuitBreaker(
                threshold=sem.breaker_threshold,
                reset_timeout_s=sem.breaker_reset_s,
                **clock_kwargs,
            ),
            fallback_provider=sem.fallback_provider,
            timeout_ms=sem.timeout_ms,
            slow_threshold_ms=sem.slow_threshold_ms,
            max_tokens=sem.max_tokens,
            temperature=sem.temperature,
            context_window=sem.context_window,
            **clock_kwargs,
        )

    def build_engine(
        self,
        registry: Optional[RuleRegistry] = None,
        validator: Optional[SemanticValidator] = None,
    ) -> ConstraintEngine:
        registry = registry or RuleRegistry(loader=self.rules_loader())
        if validator is None:
            validator = self.build_validator()
        return ConstraintEngine(
            registry,
            validator,
            blocking_levels=self.enforcement.blocking_levels,
            deadline_s=self.enforcement.deadline_s,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source_path) if self.source_path else None,
            "enforcement": self.enforcement.to_dict(),
            "semantic": self.semantic.to_dict(),
        }


def load_config(config_path: Optional[Path] = None) -> MonitorConfig:
    """
    Load constraint-monitor configuration.

    Note:
        - If YAML is not found or invalid, returns code defaults
        - System works without YAML (code is truth)
    """
    return MonitorConfig.from_yaml(config_path)


def load_rules(config_path: Optional[Path] = None) -> RuleSet:
    """Rules from the config file's ``constraints`` list, else the built-in defaults"""
    ruleset = load_config(config_path).rules_loader().load()
    logger.debug(f"Loaded {len(ruleset)} rules from {ruleset.source}")
    return ruleset


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "MonitorConfig",
    "candidate_paths",
    "find_config_file",
    "load_config",
    "load_rules",
]
