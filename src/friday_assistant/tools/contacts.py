import json
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ToolExecutionError
from .base import BaseTool


class GetContactsTool(BaseTool):
    """Return the user's contacts from a YAML file.

    The file holds a list of mappings with ``name`` and ``email`` keys, either
    at the top level or under a ``contacts`` key. A missing file means no
    contacts.
    """

    def __init__(self, contacts_file: str = "contacts.yaml"):
        self.contacts_file = Path(contacts_file).expanduser()

    @property
    def name(self) -> str:
        return "get-contacts"

    @property
    def description(self) -> str:
        return "Fetch the user contacts/emails."

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}, "additionalProperties": False}

    def execute(self) -> str:
        if not self.contacts_file.exists():
            return "[]"

        try:
            data = yaml.safe_load(self.contacts_file.read_text(encoding="utf-8")) or []
        except (OSError, yaml.YAMLError) as e:
            raise ToolExecutionError(self.name, f"Error reading contacts: {e}") from e

        if isinstance(data, dict):
            data = data.get("contacts") or []
        if not isinstance(data, list):
            raise ToolExecutionError(self.name, "Error reading contacts: expected a list of contacts")

        contacts = [
            {"name": entry.get("name"), "email": entry.get("email")}
            for entry in data
            if isinstance(entry, dict)
        ]
        return json.dumps(contacts)
