"""CLI command implementations."""

import json
from pathlib import Path
from typing import List, Optional

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ... import __version__
from ...domain.models.security import RiskLevel, SecurityAlert
from ...domain.services.risk_scoring import assess_alerts
from ...infrastructure.config.config_loader import ConfigLoader
from ...infrastructure.logging import get_logger
from ...infrastructure.presentation.error_presenter import ErrorPresenter


logger = get_logger("cli")

_RISK_STYLES = {
    RiskLevel.CRITICAL: "bold red",
    RiskLevel.HIGH: "red",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
}


def load_alerts(path: Path) -> List[SecurityAlert]:
    """
    Read alerts from a JSON or YAML file.

    The file holds either a list of alerts or a mapping with an
    ``alerts`` key.

    Raises:
        ValueError: If the file is not a valid alert document
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid alert file {path}: {e}")

    if isinstance(data, dict):
        data = data.get("alerts", [])
    if data is None:
        data = []
    if not isinstance(data, list):
        raise ValueError(f"Alert file {path} must contain a list of alerts")

    try:
        return [SecurityAlert.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed alert in {path}: {e}")


def assess_command(
    alerts_file: Path,
    output_format: str,
    verbose: bool,
    console: Console,
):
    """
    Execute assess command.

    Args:
        alerts_file: File with alerts to score
        output_format: "console" or "json"
        verbose: Show technical details on error
        console: Rich console
    """
    try:
        alerts = load_alerts(alerts_file)
        assessment = assess_alerts(alerts)
        logger.debug(
            "Alerts assessed",
            extra={"alert_count": assessment.alert_count, "risk_level": assessment.risk_level.value},
        )
    except Exception as e:
        console.print(ErrorPresenter.present(e, verbose=verbose), markup=False)
        raise SystemExit(1)

    if output_format == "json":
        payload = assessment.to_dict()
        payload["alerts"] = [alert.to_dict() for alert in alerts]
        console.print_json(json.dumps(payload))
        return

    style = _RISK_STYLES[assessment.risk_level]
    console.print(Panel.fit(
        f"Risk level: [{style}]{assessment.risk_level.value.upper()}[/{style}]",
        title="Security Assessment",
        border_style="blue",
    ))

    if alerts:
        table = Table(title=f"Alerts ({len(alerts)})")
        table.add_column("ID")
        table.add_column("Type")
        table.add_column("Severity")
        table.add_column("Message")
        for alert in alerts:
            table.add_row(alert.id, alert.type, alert.severity.value, alert.message)
        console.print(table)
    else:
        console.print("No alerts")

    console.print("\n[bold]Recommendations:[/bold]")
    for recommendation in assessment.recommendations:
        console.print(f"  - {recommendation}")


def info_command(config_path: Optional[str], console: Console):
    """
    Execute info command.

    Args:
        config_path: Config file path
        console: Rich console
    """
    console.print(Panel.fit(
        "[bold]authguard System Information[/bold]",
        border_style="blue"
    ))

    try:
        config = ConfigLoader.load(config_path)
    except Exception as e:
        console.print(ErrorPresenter.present(e), markup=False)
        raise SystemExit(1)

    console.print("\n[bold]Version:[/bold]")
    console.print(f"  authguard: {__version__}")

    console.print("\n[bold]Audit Defaults:[/bold]")
    console.print(f"  IP Address: {config.audit.ip_address}")
    console.print(f"  User Agent: {config.audit.user_agent}")
    console.print(f"  Event IDs: {config.audit.id_strategy}")

    console.print("\n[bold]Sensitive Permissions:[/bold]")
    console.print(f"  {', '.join(config.permissions.sensitive)}")

    console.print("\n[bold]Logging:[/bold]")
    console.print(f"  Level: {config.logging.level}")
    console.print(f"  File: {config.logging.file or 'disabled'}")


def config_command(
    init: bool,
    path: Optional[str],
    show: bool,
    console: Console,
):
    """
    Execute config command.

    Args:
        init: Create default config
        path: Config file path
        show: Show current config
        console: Rich console
    """
    console.print(Panel.fit(
        "[bold]authguard Configuration[/bold]",
        border_style="blue"
    ))

    if init:
        try:
            config_path = ConfigLoader.create_default_config(path)
        except OSError as e:
            console.print(ErrorPresenter.present(e), markup=False)
            raise SystemExit(1)
        console.print(f"\n[green]Configuration file created: {config_path}[/green]")

    elif show:
        try:
            config = ConfigLoader.load(path)
        except Exception as e:
            console.print(ErrorPresenter.present(e), markup=False)
            raise SystemExit(1)
        console.print("\n[bold]Current Configuration:[/bold]")
        console.print(config.to_yaml(), markup=False)

    else:
        config_info = ConfigLoader.get_config_info()

        console.print("\n[bold]Configuration Files:[/bold]")
        if config_info["existing_configs"]:
            for cfg in config_info["existing_configs"]:
                console.print(f"  [green]{cfg}[/green]")
        else:
            console.print("  No configuration files found")

        console.print("\n[bold]Environment Overrides:[/bold]")
        if config_info["env_overrides"]:
            for env_var in config_info["env_overrides"]:
                console.print(f"  {env_var}")
        else:
            console.print("  None")

        console.print("\n[bold]Default Locations:[/bold]")
        for default_path in config_info["default_paths"]:
            console.print(f"  {default_path}")
