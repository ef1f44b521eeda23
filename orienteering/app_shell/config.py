import logging

from orienteering.rules.models import Rules


def configure_logging(rules: Rules) -> None:
    """
    Configure root logging from the rules file. Safe to call more than once.
    """
    level = logging.getLevelName(rules.logging.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown logging level in rules: {rules.logging.level}")

    logging.basicConfig(level=level, format=rules.logging.format, force=True)
