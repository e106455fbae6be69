"""
OTK - Outline Toolkit

Agenda views over hierarchical outline documents.

Design Principles:
- The outline is read-only input; every stage produces new values
- Selection is data: match and filter predicate specs supplied per call
- No hidden globals: today, done keywords and styles are passed explicitly
- Rendered entries carry styled text plus a clean attribute map

Example Usage:
    >>> from otk import Outline, AgendaContext, AgendaRegistry
    >>> outline = Outline.from_dict(data)
    >>> context = AgendaContext.create(today="2024-01-10")
    >>> entries = AgendaRegistry().evaluate("today", outline, context)
    >>> [entry.plain for entry in entries]
"""

__version__ = "0.1.0"
__author__ = "OTK Contributors"

# Data model
from otk.models import HeadlineNode, Outline, Timestamp, TimestampKind

# Configuration
from otk.config import OtkConfig, get_config, init_config, configure_logging

# Agenda pipeline
from otk.agenda import (
    AgendaContext,
    AgendaStyles,
    AgendaRegistry,
    DecoratedEntry,
    build_agenda,
    run_agenda,
)

__all__ = [
    # Models
    "HeadlineNode",
    "Outline",
    "Timestamp",
    "TimestampKind",
    # Config
    "OtkConfig",
    "get_config",
    "init_config",
    "configure_logging",
    # Agenda
    "AgendaContext",
    "AgendaStyles",
    "AgendaRegistry",
    "DecoratedEntry",
    "build_agenda",
    "run_agenda",
]
