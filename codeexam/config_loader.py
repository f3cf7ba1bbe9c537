"""
Configuration loader for the exam client.

Handles loading and validating the client configuration file.
"""

import json
import os
import sys
from pathlib import Path
from typing import Optional

from .models import ClientConfig


API_URL_ENV = "CODEEXAM_API_URL"


def load_config(config_path: Optional[Path] = None) -> ClientConfig:
    """
    Load client configuration from a JSON file.

    Args:
        config_path: Path to the configuration file. If None, looks for
                    'config.json' next to the executable/script.

    Returns:
        ClientConfig object with validated configuration

    Raises:
        ValueError: If config is invalid
    """
    if config_path is None:
        if getattr(sys, 'frozen', False):
            exe_dir = Path(sys.executable).parent
        else:
            exe_dir = Path(__file__).parent.parent

        config_path = exe_dir / "config.json"

    if not config_path.exists():
        print(f"Warning: Config file '{config_path}' not found. Using default configuration.")
        data = {}
    else:
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}")

    if not isinstance(data, dict):
        raise ValueError("Invalid configuration: top level must be an object")

    if os.environ.get(API_URL_ENV):
        data = dict(data, api_base_url=os.environ[API_URL_ENV])

    config = ClientConfig.from_dict(data)

    is_valid, error_message = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid configuration: {error_message}")

    return config


def create_sample_config(output_path: Path):
    """
    Create a sample configuration file.

    Args:
        output_path: Path where to save the sample config
    """
    sample_config = {
        "api_base_url": "http://127.0.0.1:8000",
        "request_timeout_seconds": 8,
        "session_dir": ".codeexam",
        "languages": ["python", "java"],
        "exam_time_minutes": -1,
        "bank_path": None,
        "_comment": "This is a sample client configuration. Adjust values as needed.",
        "_instructions": {
            "api_base_url": "Base URL of the exam API (overridden by CODEEXAM_API_URL)",
            "request_timeout_seconds": "Timeout for every call to the exam API",
            "session_dir": "Directory for saved sessions and session logs",
            "languages": "Selectable languages; the first one is the default",
            "exam_time_minutes": "Exam duration in minutes, -1 for no limit",
            "bank_path": "Optional local .json or .enc problem bank used instead of the remote catalog"
        }
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(sample_config, f, indent=2)

    print(f"Sample configuration created at: {output_path}")
