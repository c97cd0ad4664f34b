#!/usr/bin/env python3
"""
armsteer Environment Configuration Helper

Provides easy access to .env configuration for the launcher and demos.
Loads the .env file and provides defaults.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from core.types import DecoderConfig, ResolverConfig, SupervisorConfig


class ConfigError(ValueError):
    """A configuration value could not be parsed"""


class ArmsteerConfig:
    """Configuration manager for armsteer"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (default: .env in current directory)
        """
        self._loaded = False

        env_path = Path(".env") if env_file is None else Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            self._loaded = True

    @property
    def loaded(self) -> bool:
        """Whether a .env file was found and loaded"""
        return self._loaded

    @property
    def connect_timeout(self) -> float:
        """Seconds to wait for the sensor (default: 10)"""
        return self._get_float("ARMSTEER_CONNECT_TIMEOUT", "10")

    @property
    def poll_hz(self) -> float:
        """Command poll rate (default: 20)"""
        return self._get_float("ARMSTEER_POLL_HZ", "20")

    @property
    def resolution(self) -> int:
        """Buckets per axis (default: 18)"""
        raw = os.getenv("ARMSTEER_RESOLUTION", "18")
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"ARMSTEER_RESOLUTION is not an integer: {raw!r}") from None

    @property
    def orientation_timeout(self) -> float:
        """Seconds without orientation before commands go neutral (default: 1.0)"""
        return self._get_float("ARMSTEER_ORIENTATION_TIMEOUT", "1.0")

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        checks = [
            ("ARMSTEER_CONNECT_TIMEOUT", lambda: self.connect_timeout),
            ("ARMSTEER_POLL_HZ", lambda: self.poll_hz),
            ("ARMSTEER_RESOLUTION", lambda: self.resolution),
            ("ARMSTEER_ORIENTATION_TIMEOUT", lambda: self.orientation_timeout),
        ]
        for name, read in checks:
            try:
                value = read()
            except ConfigError as e:
                errors.append(str(e))
                continue
            if value <= 0:
                errors.append(f"{name} must be positive (got {value})")

        return len(errors) == 0, errors

    def decoder_config(self) -> DecoderConfig:
        return DecoderConfig(resolution=self.resolution)

    def resolver_config(self) -> ResolverConfig:
        return ResolverConfig(resolution=self.resolution)

    def supervisor_config(self) -> SupervisorConfig:
        return SupervisorConfig(
            loop_interval=1.0 / self.poll_hz,
            connect_timeout=self.connect_timeout,
            orientation_timeout=self.orientation_timeout,
        )

    def print_status(self):
        """Print configuration status"""
        print("armsteer Configuration Status:")
        print(f"  .env loaded:   {'Yes' if self._loaded else 'No'}")

        is_valid, errors = self.validate()
        if is_valid:
            print(f"  Timeout:       {self.connect_timeout}s")
            print(f"  Poll rate:     {self.poll_hz} Hz")
            print(f"  Resolution:    {self.resolution}")
            print(f"  Stale after:   {self.orientation_timeout}s")
            print("\n  Status: Configuration is valid")
        else:
            print("\n  Status: Configuration has errors:")
            for error in errors:
                print(f"    - {error}")

    @staticmethod
    def _get_float(name: str, default: str) -> float:
        raw = os.getenv(name, default)
        try:
            return float(raw)
        except ValueError:
            raise ConfigError(f"{name} is not a number: {raw!r}") from None


# Global config instance
_config = None

def get_config(reload: bool = False) -> ArmsteerConfig:
    """
    Get the global configuration instance

    Args:
        reload: Force reload of .env file

    Returns:
        ArmsteerConfig instance
    """
    global _config
    if _config is None or reload:
        _config = ArmsteerConfig()
    return _config


def main():
    """Command-line utility to check configuration"""
    import argparse

    parser = argparse.ArgumentParser(
        description="armsteer Configuration Utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Check current configuration:
    python armsteer_config.py

  Validate configuration:
    python armsteer_config.py --validate

  Use custom .env file:
    python armsteer_config.py --env-file /path/to/.env
        """
    )

    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--validate", action="store_true",
                       help="Validate configuration and exit with error if invalid")

    args = parser.parse_args()

    config = ArmsteerConfig(args.env_file)
    config.print_status()

    if args.validate:
        is_valid, errors = config.validate()
        if not is_valid:
            print("\nValidation failed!")
            import sys
            sys.exit(1)
        else:
            print("\nValidation passed!")


if __name__ == "__main__":
    main()
