# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Structured logging with sensitive data redaction."""

import logging
import json
import re
import sys
from typing import Any


REDACT_PATTERNS = [
    re.compile(r"((?:AKIA|ASIA)[A-Z0-9]{4})[A-Z0-9]{12}"),
    re.compile(r"(aws_secret_access_key\s*[=:]\s*\S{4})\S*", re.IGNORECASE),
    re.compile(r"(redis://[^:/@\s]*:)[^@\s]+(@)"),
]


def redact_sensitive(text: str) -> str:
    for pattern in REDACT_PATTERNS:
        if pattern.groups == 2:
            text = pattern.sub(r"\1[REDACTED]\2", text)
        else:
            text = pattern.sub(r"\1[REDACTED]", text)
    return text


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_sensitive(record.getMessage()),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = redact_sensitive(str(record.exc_info[1]))
        return json.dumps(log_entry)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        return redact_sensitive(msg)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger("dynacache")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)
