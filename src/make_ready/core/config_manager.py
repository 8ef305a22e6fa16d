import json
import logging
from pathlib import Path


class ConfigManager:
    """Manages configuration loading, saving, and defaults"""

    def __init__(self, base_dir=None):
        if base_dir is None:
            # Use current working directory if no base_dir provided
            base_dir = Path.cwd()
        self.base_dir = Path(base_dir)
        self.configs_dir = self.base_dir / "configurations"

    def get_default_config(self):
        """Get default configuration"""
        return {
            "power_company_keywords": [
                "CPS",
                "POWER"
            ],
            "target_analysis_case": "Light - Grade C",
            "fallback_analysis_case": "Recommended",
            "measured_design_names": [
                "Measured Design"
            ],
            "recommended_design_names": [
                "Recommended Design"
            ],
            "duplicate_pole_policy": "last",
            "output_settings": {
                "worksheet_name": "Make Ready Report",
                "file_suffix": "_Make_Ready_Report.xlsx",
                "column_widths": [10, 20, 15, 20, 25, 18, 18, 18, 18, 20, 20, 35, 15, 15, 20],
                "wrap_cells": ["B1", "O2"]
            },
            "processing_options": {
                "debug_mode": False
            }
        }

    def get_config_file_path(self, config_name):
        """Get file path for configuration"""
        if config_name == "Default":
            return self.base_dir / "make_ready_config.json"
        else:
            return self.configs_dir / f"{config_name}.json"

    def get_available_configs(self):
        """Get list of available configurations"""
        configs = ["Default"]
        if self.configs_dir.is_dir():
            for file in sorted(self.configs_dir.glob("*.json")):
                configs.append(file.stem)
        return configs

    def load_config(self, config_name="Default"):
        """Load configuration, overlaying the saved file (if any) on the defaults"""
        config = self.get_default_config()
        config_file = self.get_config_file_path(config_name)

        if config_file.exists():
            try:
                with open(config_file, 'r') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logging.warning(f"Failed to load configuration from {config_file}: {e}")
                return config

            if not isinstance(loaded, dict):
                logging.warning(f"Ignoring configuration file {config_file}: top level is not an object")
                return config

            # Nested sections are merged key by key so a partial file keeps the other defaults
            for key, value in loaded.items():
                if isinstance(value, dict) and isinstance(config.get(key), dict):
                    config[key].update(value)
                else:
                    config[key] = value
            logging.info(f"Configuration for '{config_name}' successfully loaded from {config_file}")
        elif config_name != "Default":
            logging.warning(f"Configuration '{config_name}' not found at {config_file}; using defaults")

        return config

    def save_config(self, config_name, config):
        """Save configuration"""
        config_file = self.get_config_file_path(config_name)
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(config_file, 'w') as f:
                json.dump(config, f, indent=2)

            logging.info(f"Configuration for '{config_name}' successfully saved to {config_file}")
            return True
        except OSError as e:
            logging.error(f"Failed to save configuration to {config_file}: {e}")
            return False

    def delete_config(self, config_name):
        """Delete configuration"""
        if config_name == "Default":
            return False

        config_file = self.get_config_file_path(config_name)
        try:
            if config_file.exists():
                config_file.unlink()
            logging.info(f"Configuration '{config_name}' deleted from {config_file}")
            return True
        except OSError as e:
            logging.error(f"Failed to delete configuration '{config_name}' at {config_file}: {e}")
            return False
