"""
Service configuration.
Loads config.yaml into typed dataclasses and applies command-line overrides.
Paths and constants are resolved here so the core only ever sees final values.
"""

import yaml
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from .errors import StartupFailure


DEFAULT_SEQUENCE_LENGTH = 295
DEFAULT_PORT = 3000


@dataclass
class AppMetadata:
    """Static metadata returned by GET /."""
    name: str = "BlockTheTweet Inference"
    author: str = "doddy-s"
    version: str = "v0.1"

    def to_dict(self) -> Dict[str, str]:
        return {'author': self.author, 'version': self.version, 'appName': self.name}


@dataclass
class ModelConfig:
    """Scoring model backend and its resource."""
    backend: str = "torchscript"
    path: Optional[str] = "./bilstm-en-683k.pt"
    device: str = "cpu"
    # Whether the runtime tolerates concurrent forward calls
    thread_safe: bool = True
    stub_bias: float = 0.0
    stub_weights: Dict[int, float] = field(default_factory=dict)


@dataclass
class ServiceConfig:
    """Complete deployment configuration."""
    app: AppMetadata = field(default_factory=AppMetadata)
    model: ModelConfig = field(default_factory=ModelConfig)
    vocabulary_path: str = "./word-index.json"
    stemmer_language: str = "english"
    sequence_length: int = DEFAULT_SEQUENCE_LENGTH

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    log_level: str = "INFO"
    log_file: Optional[str] = None

    storage_enabled: bool = False
    database_url: str = "sqlite:///./block_the_tweet.sqlite"

    eval_num_samples: int = 200
    eval_seed: int = 42
    eval_threshold: float = 0.5
    eval_output_dir: str = "results"

    def validate(self):
        """Reject values the service cannot start with."""
        if isinstance(self.sequence_length, bool) or not isinstance(self.sequence_length, int) \
                or self.sequence_length <= 0:
            raise StartupFailure(f"sequence_length must be a positive integer, got {self.sequence_length!r}")
        if not (0 < int(self.port) < 65536):
            raise StartupFailure(f"port out of range: {self.port!r}")
        if self.model.backend not in ('torchscript', 'stub'):
            raise StartupFailure(f"unknown model backend: {self.model.backend!r}")
        if self.model.backend == 'torchscript' and not self.model.path:
            raise StartupFailure("model.path is required for the torchscript backend")
        if not self.vocabulary_path:
            raise StartupFailure("vocabulary.path is required")
        return self


def load_yaml(config_path: str) -> Dict[str, Any]:
    """Load a YAML file, failing startup if it is missing or malformed."""
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise StartupFailure(f"cannot read config {config_path}: {e}") from e


def config_from_dict(raw: Dict[str, Any]) -> ServiceConfig:
    """
    Build a ServiceConfig from the parsed YAML mapping.
    Missing sections and keys fall back to defaults.

    Args:
        raw: Mapping as returned by yaml.safe_load

    Returns:
        Validated ServiceConfig
    """
    app_cfg = raw.get('app') or {}
    model_cfg = raw.get('model') or {}
    stub_cfg = model_cfg.get('stub') or {}
    server_cfg = raw.get('server') or {}
    logging_cfg = raw.get('logging') or {}
    storage_cfg = raw.get('storage') or {}
    eval_cfg = raw.get('evaluation') or {}
    defaults = ServiceConfig()

    try:
        model = ModelConfig(
            backend=model_cfg.get('backend', defaults.model.backend),
            path=model_cfg.get('path', defaults.model.path),
            device=model_cfg.get('device', defaults.model.device),
            thread_safe=bool(model_cfg.get('thread_safe', defaults.model.thread_safe)),
            stub_bias=float(stub_cfg.get('bias', 0.0)),
            stub_weights={int(k): float(v) for k, v in (stub_cfg.get('weights') or {}).items()},
        )

        config = ServiceConfig(
            app=AppMetadata(
                name=app_cfg.get('name', defaults.app.name),
                author=app_cfg.get('author', defaults.app.author),
                version=app_cfg.get('version', defaults.app.version),
            ),
            model=model,
            vocabulary_path=(raw.get('vocabulary') or {}).get('path', defaults.vocabulary_path),
            stemmer_language=(raw.get('stemmer') or {}).get('language', defaults.stemmer_language),
            sequence_length=(raw.get('preprocessing') or {}).get('sequence_length', defaults.sequence_length),
            host=server_cfg.get('host', defaults.host),
            port=int(server_cfg.get('port', defaults.port)),
            log_level=logging_cfg.get('level', defaults.log_level),
            log_file=logging_cfg.get('log_file'),
            storage_enabled=bool(storage_cfg.get('enabled', False)),
            database_url=storage_cfg.get('database_url', defaults.database_url),
            eval_num_samples=int(eval_cfg.get('num_samples', defaults.eval_num_samples)),
            eval_seed=int(eval_cfg.get('seed', defaults.eval_seed)),
            eval_threshold=float(eval_cfg.get('threshold', defaults.eval_threshold)),
            eval_output_dir=eval_cfg.get('output_dir', defaults.eval_output_dir),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise StartupFailure(f"invalid configuration: {e}") from e

    return config.validate()


def load_config(config_path: str = "config.yaml") -> ServiceConfig:
    """Load configuration from YAML file."""
    return config_from_dict(load_yaml(config_path))


def apply_overrides(config: ServiceConfig, overrides: Dict[str, Any]) -> ServiceConfig:
    """
    Apply command-line overrides on top of file configuration.
    Keys whose value is None are ignored.

    Args:
        config: Configuration loaded from file
        overrides: Mapping of override name to value (model, vocabulary,
            language, host, port, sequence_length). A model path always
            selects the torchscript backend.

    Returns:
        The same config object, re-validated
    """
    if overrides.get('model') is not None:
        config.model.backend = 'torchscript'
        config.model.path = overrides['model']
    if overrides.get('vocabulary') is not None:
        config.vocabulary_path = overrides['vocabulary']
    if overrides.get('language') is not None:
        config.stemmer_language = overrides['language']
    if overrides.get('host') is not None:
        config.host = overrides['host']
    if overrides.get('port') is not None:
        config.port = int(overrides['port'])
    if overrides.get('sequence_length') is not None:
        config.sequence_length = int(overrides['sequence_length'])
    return config.validate()
