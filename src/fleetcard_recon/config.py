"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class BankInputConfig(BaseModel):
    """Layout of the card issuer statement CSV."""

    encoding: str = "utf-8"
    delimiter: str = ","
    skip_header: bool = True

    # Rows with fewer populated fields are ignored
    min_fields: int = 5

    # Zero-based column positions
    column_mappings: dict[str, int] = Field(
        default_factory=lambda: {
            "account_no": 0,
            "transaction_date": 2,
            "invoice_number": 4,
            "total_amount": 10,
            "merchant_id": 13,
            "fuel_brand": 14,
        }
    )


class BookInputConfig(BaseModel):
    """Layout of the general ledger CSV."""

    encoding: str = "utf-8"
    delimiter: str = ","
    skip_header: bool = True
    column_mappings: dict[str, int] = Field(
        default_factory=lambda: {
            "document_no": 0,
            "posting_date": 1,
            "description": 2,
            "amount": 3,
        }
    )


class InputConfig(BaseModel):
    """Configuration for input file parsing."""

    bank: BankInputConfig = Field(default_factory=BankInputConfig)
    book: BookInputConfig = Field(default_factory=BookInputConfig)


class MatchingConfig(BaseModel):
    """Configuration for the matching engine."""

    # Amounts closer than this are treated as equal (exclusive bound)
    amount_tolerance: float = 0.01
    enable_inferred_matching: bool = True


class ExcelOutputConfig(BaseModel):
    """Configuration for Excel output."""

    filename_template: str = "reconciliation_report_{date}_{time}.xlsx"


class SheetConfig(BaseModel):
    """Configuration for a report sheet."""

    enabled: bool = True
    name: str


class SheetsConfig(BaseModel):
    """Configuration for all report sheets."""

    summary: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Summary"))
    all_results: SheetConfig = Field(default_factory=lambda: SheetConfig(name="All Results"))
    matched: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Matched"))
    discrepancies: SheetConfig = Field(
        default_factory=lambda: SheetConfig(name="Discrepancies")
    )
    missing: SheetConfig = Field(default_factory=lambda: SheetConfig(name="Missing Entries"))


class OutputConfig(BaseModel):
    """Configuration for output."""

    excel: ExcelOutputConfig = Field(default_factory=ExcelOutputConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "bank": {
                "encoding": "utf-8",
                "delimiter": ",",
                "skip_header": True,
                "min_fields": 5,
                "column_mappings": {
                    "account_no": 0,
                    "transaction_date": 2,
                    "invoice_number": 4,
                    "total_amount": 10,
                    "merchant_id": 13,
                    "fuel_brand": 14,
                },
            },
            "book": {
                "encoding": "utf-8",
                "delimiter": ",",
                "skip_header": True,
                "column_mappings": {
                    "document_no": 0,
                    "posting_date": 1,
                    "description": 2,
                    "amount": 3,
                },
            },
        },
        "matching": {
            "amount_tolerance": 0.01,
            "enable_inferred_matching": True,
        },
        "output": {
            "excel": {
                "filename_template": "reconciliation_report_{date}_{time}.xlsx",
            },
            "sheets": {
                "summary": {"enabled": True, "name": "Summary"},
                "all_results": {"enabled": True, "name": "All Results"},
                "matched": {"enabled": True, "name": "Matched"},
                "discrepancies": {"enabled": True, "name": "Discrepancies"},
                "missing": {"enabled": True, "name": "Missing Entries"},
            },
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "log_file": None,
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a mapping"
            )

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# Fleet Card Reconciliation Configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(get_default_config(), default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
