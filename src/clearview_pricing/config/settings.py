"""
Centralized settings and path configuration for the pricing backend.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional


def get_package_root() -> Path:
    """Get the clearview_pricing package directory (where data/ lives)."""
    return Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return current.parent.parent.parent.parent


def _env_decimal(name: str) -> Optional[Decimal]:
    # Imported here: the engine package imports this module
    from ..engine.errors import CatalogError

    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        raise CatalogError(f"Environment variable {name}={value!r} is not a number")
    if not amount.is_finite():
        raise CatalogError(f"Environment variable {name}={value!r} is not finite")
    return amount


def _env_default_units() -> Decimal:
    from ..engine.errors import CatalogError, InvalidUnits
    from ..engine.pricing_engine import coerce_units

    units = _env_decimal('CLEARVIEW_DEFAULT_UNITS')
    if units is None:
        return Decimal("1")
    try:
        return coerce_units(units)
    except InvalidUnits:
        raise CatalogError(f"CLEARVIEW_DEFAULT_UNITS must be a usable unit count, got {units}")


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Input files
    catalog_csv: Path
    policy_json: Path

    # Env overrides for the policy file
    tax_rate_override: Optional[Decimal] = None
    buffer_rate_override: Optional[Decimal] = None

    # Units used when a unit estimator fails
    default_units: Decimal = Decimal("1")

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the package data and environment."""
        root = project_root or get_project_root()
        data_dir = get_package_root() / 'data'

        catalog = os.environ.get('CLEARVIEW_CATALOG')
        policy = os.environ.get('CLEARVIEW_POLICY')

        return cls(
            project_root=root,
            catalog_csv=Path(catalog) if catalog else data_dir / 'services.csv',
            policy_json=Path(policy) if policy else data_dir / 'pricing_policy.json',
            tax_rate_override=_env_decimal('CLEARVIEW_TAX_RATE'),
            buffer_rate_override=_env_decimal('CLEARVIEW_BUFFER_RATE'),
            default_units=_env_default_units(),
            log_level=os.environ.get('CLEARVIEW_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
