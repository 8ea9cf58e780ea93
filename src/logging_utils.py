"""
Logging setup for the ACH command line tools.

Library modules only call logging.getLogger(__name__); entry points call
setup_json_logger() once to get colorized JSON log lines on stdout.
"""

import json
import logging
import sys
from typing import Any

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JsonLexer
from pythonjsonlogger.json import JsonFormatter

from decimal_utils import FinancialJsonEncoder


class ColorizedJsonFormatter(JsonFormatter):
    """JSON formatter with terminal syntax highlighting.

    Decimal amounts and dates in extra= are serialized by FinancialJsonEncoder.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs, json_default=FinancialJsonEncoder().default)

    def format(self, record: Any) -> str:
        json_str = super().format(record)
        return highlight(json_str, JsonLexer(), TerminalFormatter())


def setup_json_logger(level: int = logging.INFO) -> None:
    """Route the root logger through ColorizedJsonFormatter."""
    json_handler = logging.StreamHandler(sys.stdout)
    json_handler.setFormatter(
        ColorizedJsonFormatter(fmt="%(asctime)s %(levelname)s %(name)s %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(json_handler)
    root_logger.setLevel(level)


def color_json(obj: Any) -> str:
    """Pretty, highlighted JSON for printing a job summary."""
    return highlight(
        json.dumps(obj, indent=2, cls=FinancialJsonEncoder),
        JsonLexer(),
        TerminalFormatter(),
    )
