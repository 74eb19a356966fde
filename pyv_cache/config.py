from __future__ import annotations
from dataclasses import dataclass
import yaml
from pathlib import Path

from .utils.logging import get_logger

logger = get_logger(__name__)

@dataclass
class SimConfig:
    """PyV-Cache Simulator Configuration"""
    # Cache geometry (s, t, b, E)
    index_bits: int = 0       # s: number of set index bits
    tag_bits: int = 8         # t: tag width used for display only
    offset_bits: int = 2      # b: number of block offset bits
    associativity: int = 1    # E: lines per set

    # Inputs
    memory_image: str = ""
    trace: str = ""

    # Config file
    config_file: str = ""

    # Reporting
    report_dir: str = "out/default_run"
    log_level: str = "INFO"

    def __post_init__(self):
        for name in ("index_bits", "tag_bits", "offset_bits"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}.")
        if not isinstance(self.associativity, int) or self.associativity < 1:
            raise ValueError(f"associativity must be a positive integer, got {self.associativity!r}.")

    @property
    def num_sets(self) -> int:
        return 1 << self.index_bits

    @property
    def block_size(self) -> int:
        return 1 << self.offset_bits

    @property
    def address_bits(self) -> int:
        """Address width implied by the geometry (t + s + b)."""
        return self.tag_bits + self.index_bits + self.offset_bits

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        for key, value in yaml_config.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and hasattr(config, key):
                setattr(config, key, value)

        config.__post_init__()
        return config
