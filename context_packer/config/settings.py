"""Configuration settings for context packing."""

from typing import Dict, Any, Optional, List, Callable, Union
from dataclasses import dataclass, field
import yaml
import json
from pathlib import Path

from ..core.items import (
    DROP_STRATEGIES,
    GROUP_BY_TURN,
    POSITIONS,
    QUERY_SOURCE,
    Priority,
)
from ..core.turns import DEFAULT_INITIATOR_ROLE


DEFAULT_RESERVE_OUTPUT = 4096


@dataclass
class Pricing:
    """Input price used for cost estimates."""
    input_per_1m: float
    provider: str = "custom"


@dataclass
class AddOptions:
    """Packing options for a registered source."""
    priority: Union[Priority, str] = Priority.MEDIUM
    position: Optional[str] = None
    keep_last: Optional[int] = None
    drop_strategy: Optional[str] = None
    group_by: Optional[str] = None
    initiator_role: str = DEFAULT_INITIATOR_ROLE
    scorer: Optional[Callable[[Any, str], float]] = None
    requires: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        try:
            self.priority = Priority(self.priority)
        except ValueError:
            raise ValueError(f"Invalid priority: {self.priority!r}") from None

        if self.position is not None and self.position not in POSITIONS:
            raise ValueError(f"Invalid position: {self.position!r}")
        if self.drop_strategy is not None and self.drop_strategy not in DROP_STRATEGIES:
            raise ValueError(f"Invalid drop strategy: {self.drop_strategy!r}")
        if self.group_by is not None and self.group_by != GROUP_BY_TURN:
            raise ValueError(f"Invalid group_by: {self.group_by!r}")
        if self.keep_last is not None and self.keep_last < 0:
            raise ValueError("keep_last must be non-negative")
        if self.scorer is not None and not callable(self.scorer):
            raise ValueError("scorer must be callable")
        self.requires = dict(self.requires or {})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AddOptions':
        """Create options from a config mapping (scorers cannot be configured)."""
        known = {'priority', 'position', 'keep_last', 'drop_strategy',
                 'group_by', 'initiator_role', 'requires'}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown source options: {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to a plain mapping, omitting unset fields."""
        data = {
            'priority': self.priority.value,
            'position': self.position,
            'keep_last': self.keep_last,
            'drop_strategy': self.drop_strategy,
            'group_by': self.group_by,
            'requires': dict(self.requires),
        }
        if self.initiator_role != DEFAULT_INITIATOR_ROLE:
            data['initiator_role'] = self.initiator_role
        return {key: value for key, value in data.items() if value not in (None, {})}


@dataclass
class SourceConfig:
    """A source declared in a configuration file."""
    content: Any
    options: AddOptions = field(default_factory=AddOptions)


@dataclass
class OptimizerConfig:
    """Main configuration for the context optimizer."""
    model: str
    context_window: int
    reserve_output: int = DEFAULT_RESERVE_OUTPUT
    pricing: Optional[Pricing] = None
    sources: Dict[str, SourceConfig] = field(default_factory=dict)

    @property
    def budget(self) -> int:
        """Tokens available for input content."""
        return self.context_window - self.reserve_output

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'OptimizerConfig':
        """Create configuration from dictionary."""
        pricing = None
        pricing_data = config_dict.get('pricing')
        if pricing_data:
            pricing = Pricing(
                input_per_1m=pricing_data['input_per_1m'],
                provider=pricing_data.get('provider', 'custom')
            )

        sources = {}
        for name, source_data in (config_dict.get('sources') or {}).items():
            source_data = dict(source_data)
            if 'content' not in source_data:
                raise ValueError(f"Source '{name}' has no content")
            content = source_data.pop('content')
            sources[name] = SourceConfig(content=content, options=AddOptions.from_dict(source_data))

        return cls(
            model=config_dict.get('model', 'gpt-4o'),
            context_window=config_dict.get('context_window', 128000),
            reserve_output=config_dict.get('reserve_output', DEFAULT_RESERVE_OUTPUT),
            pricing=pricing,
            sources=sources
        )

    @classmethod
    def from_yaml(cls, file_path: str) -> 'OptimizerConfig':
        """Load configuration from YAML file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict or {})

    @classmethod
    def from_json(cls, file_path: str) -> 'OptimizerConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_file(cls, file_path: str) -> 'OptimizerConfig':
        """Load configuration, picking the parser from the file extension."""
        if Path(file_path).suffix.lower() == '.json':
            return cls.from_json(file_path)
        return cls.from_yaml(file_path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        data = {
            'model': self.model,
            'context_window': self.context_window,
            'reserve_output': self.reserve_output,
            'sources': {
                name: dict(source.options.to_dict(), content=source.content)
                for name, source in self.sources.items()
            }
        }
        if self.pricing:
            data['pricing'] = {
                'input_per_1m': self.pricing.input_per_1m,
                'provider': self.pricing.provider
            }
        return data

    def save_yaml(self, file_path: str):
        """Save configuration to YAML file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def save_json(self, file_path: str):
        """Save configuration to JSON file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def get_source_config(self, source_name: str) -> Optional[SourceConfig]:
        """Get configuration for a specific source."""
        return self.sources.get(source_name)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if self.context_window <= 0:
            issues.append("Context window must be positive")

        if self.reserve_output < 0:
            issues.append("reserve_output must be non-negative")
        elif self.reserve_output >= self.context_window:
            issues.append("reserve_output leaves no budget for input")

        if self.pricing and self.pricing.input_per_1m < 0:
            issues.append("Pricing input_per_1m must be non-negative")

        for name, source in self.sources.items():
            if name == QUERY_SOURCE:
                issues.append(f"Source name '{name}' is reserved for the pack query")
            options = source.options
            if options.keep_last and options.priority is Priority.REQUIRED:
                issues.append(f"Source '{name}': keep_last has no effect on required sources")
            if options.group_by and not isinstance(source.content, (list, tuple)):
                issues.append(f"Source '{name}': group_by needs a list of messages")

        return issues


def get_default_config() -> OptimizerConfig:
    """Get a default configuration for a 128k-token chat model."""
    return OptimizerConfig.from_dict({
        'model': 'gpt-4o',
        'context_window': 128000,
        'reserve_output': DEFAULT_RESERVE_OUTPUT,
    })
