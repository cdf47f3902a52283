"""Settings and design file loading for the countertop configurator.

Public API:
    - ShopSettings: Root model for shop settings files
    - DesignFile: Root model for countertop design files
    - load_settings: Load shop settings from a JSON file
    - load_design: Load a design from a JSON file
    - load_design_from_dict: Validate a design given as a dictionary
    - ConfigError: Exception for settings and design file errors
    - settings_to_rates / settings_to_placement_rules /
      settings_to_cut_sheet_settings: Convert settings to domain objects
    - design_to_configuration: Replay a design through the editor commands

Example:
    >>> from pathlib import Path
    >>> from countertops.application.config import load_design, ConfigError
    >>>
    >>> try:
    ...     design = load_design(Path("vanity.json"))
    ...     config, messages = design_to_configuration(design)
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from countertops.application.config.adapter import (
    design_to_configuration,
    settings_to_cut_sheet_settings,
    settings_to_placement_rules,
    settings_to_rates,
)
from countertops.application.config.loader import (
    ConfigError,
    load_design,
    load_design_from_dict,
    load_settings,
)
from countertops.application.config.schemas import (
    SUPPORTED_VERSIONS,
    CutSheetConfig,
    DesignFile,
    DimensionsConfig,
    DistanceBandConfig,
    PlacementConfig,
    PricingConfig,
    ShopSettings,
    SinkConfig,
    TaxRateConfig,
)

__all__ = [
    "ConfigError",
    "CutSheetConfig",
    "DesignFile",
    "DimensionsConfig",
    "DistanceBandConfig",
    "PlacementConfig",
    "PricingConfig",
    "SUPPORTED_VERSIONS",
    "ShopSettings",
    "SinkConfig",
    "TaxRateConfig",
    "design_to_configuration",
    "load_design",
    "load_design_from_dict",
    "load_settings",
    "settings_to_cut_sheet_settings",
    "settings_to_placement_rules",
    "settings_to_rates",
]
