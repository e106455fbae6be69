"""
Agenda Registry - named agenda management.

The registry stores agenda definitions and resolves them against a
context, enabling:
- Agenda definitions from YAML files
- Programmatic registration
- Built-in agendas for common patterns
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from otk.agenda.core import AgendaContext, AgendaError
from otk.agenda.parser import AgendaDefinition, AgendaParser, parse_agenda_file
from otk.agenda.pipeline import Finalizer

if TYPE_CHECKING:
    from otk.agenda.filter import Tree
    from otk.config import OtkConfig

logger = logging.getLogger(__name__)


class AgendaNotFoundError(AgendaError):
    """Raised when an agenda is not found in the registry."""
    pass


BUILTIN_AGENDAS: Dict[str, Dict[str, Any]] = {
    "todo": {
        "description": "All open todo items",
        "match": [{"todo": True}],
        "filter": [{"done": True}],
    },
    "scheduled": {
        "description": "Everything with a scheduled date",
        "match": [{"scheduled": True}],
    },
    "deadlines": {
        "description": "Open items with a deadline",
        "match": [{"deadline": True}],
        "filter": [{"done": True}],
    },
    "today": {
        "description": "Scheduled or due today or earlier",
        "match": [
            {"scheduled": {"op": "<=", "date": "today"}},
            {"deadline": {"op": "<=", "date": "today"}},
        ],
    },
}


class AgendaRegistry:
    """
    Registry for named agendas.

    Definitions are kept raw and parsed on each get(), since relative
    dates and done keywords depend on the context.

    Example:
        registry = AgendaRegistry()
        registry.load_file("agendas.yaml")

        context = AgendaContext.create(today="2024-01-10")
        entries = registry.evaluate("today", outline, context)
    """

    def __init__(self):
        self._definitions: Dict[str, Dict[str, Any]] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

        self._register_builtins()

    def _register_builtins(self):
        """Register built-in agendas."""
        for name, definition in BUILTIN_AGENDAS.items():
            self.register_definition(name, definition, metadata={"builtin": True})

    def register_definition(
        self,
        name: str,
        definition: Dict[str, Any],
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Register an agenda definition.

        Args:
            name: Agenda name (unique identifier)
            definition: Raw definition dictionary
            metadata: Optional metadata (builtin flag, source file, etc.)
        """
        if not isinstance(definition, dict):
            raise AgendaError(f"Agenda definition for {name!r} must be a dictionary")

        self._definitions[name] = dict(definition)
        self._metadata[name] = dict(metadata or {})

        if "description" in definition:
            self._metadata[name]["description"] = definition["description"]

    def get(self, name: str, context: AgendaContext) -> AgendaDefinition:
        """
        Get an agenda by name, parsed against `context`.

        Raises:
            AgendaNotFoundError: If the agenda is not registered
        """
        if name not in self._definitions:
            raise AgendaNotFoundError(f"Agenda not found: {name}")
        return AgendaParser(context).parse(self._definitions[name], name=name)

    def has(self, name: str) -> bool:
        """Check if an agenda exists in the registry."""
        return name in self._definitions

    def list(self, include_builtin: bool = True) -> List[str]:
        """
        List registered agenda names.

        Args:
            include_builtin: Include built-in agendas
        """
        names = set(self._definitions)

        if not include_builtin:
            names = {n for n in names if not self._metadata.get(n, {}).get("builtin")}

        return sorted(names)

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """Get metadata for an agenda."""
        return self._metadata.get(name, {})

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Load agendas from a YAML file.

        Returns:
            Number of agendas loaded
        """
        data = parse_agenda_file(path)
        count = 0

        for name, definition in data.items():
            if isinstance(definition, dict):
                self.register_definition(name, definition, metadata={"source": str(path)})
                count += 1
            else:
                logger.warning(f"Skipping agenda {name!r} in {path}: not a mapping")

        logger.info(f"Loaded {count} agendas from {path}")
        return count

    def evaluate(
        self,
        name: str,
        tree: "Tree",
        context: AgendaContext,
        finalize: Optional[Finalizer] = None,
    ) -> Any:
        """Convenience method to get and run an agenda."""
        return self.get(name, context).evaluate(tree, context, finalize=finalize)

    def info(self) -> Dict[str, Any]:
        """
        Get registry information.

        Returns:
            Dictionary with registry stats and agenda list
        """
        agendas = []
        for name in self.list():
            meta = self._metadata.get(name, {})
            agendas.append({
                "name": name,
                "description": meta.get("description", ""),
                "builtin": meta.get("builtin", False),
            })

        return {
            "total_agendas": len(agendas),
            "builtin_agendas": sum(1 for a in agendas if a["builtin"]),
            "custom_agendas": sum(1 for a in agendas if not a["builtin"]),
            "agendas": agendas,
        }

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "AgendaRegistry":
        """Create a registry and load agendas from a YAML file."""
        registry = cls()
        registry.load_file(path)
        return registry

    @classmethod
    def from_config(cls, config: "OtkConfig") -> "AgendaRegistry":
        """
        Create a registry with the configured agenda file loaded.

        A missing agenda file is not an error; only built-ins are
        available then.
        """
        registry = cls()
        path = config.get_agendas_path()
        if path.exists():
            registry.load_file(path)
        else:
            logger.debug(f"No agenda file at {path}")
        return registry

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __iter__(self):
        return iter(self.list())

    def __len__(self) -> int:
        return len(self.list())
