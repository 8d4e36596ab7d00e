"""
Widget Editor Forms - the editable view produced by a widget's editor capability.

An editor capability is a pure function `(config, on_change) -> EditorForm`.
The form lists the editable fields with their current values and knows how
to turn submitted values into a config patch, which it forwards to
`on_change`. The configurator wires `on_change` to
LayoutModel.update_instance_config.

Most widgets describe their options declaratively:

    editor = schema_editor([
        EditorField(name="url", label="Image URL", kind=FieldKind.URL),
        EditorField(name="fit", label="Fit", kind=FieldKind.SELECT,
                    options=["cover", "contain", "fill"]),
    ])
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


logger = logging.getLogger("signage.widgets.editor")


ChangeCallback = Callable[[Dict[str, Any]], None]


class FieldKind(str, Enum):
    """Input kinds understood by the configurator UI."""
    STRING = "string"
    TEXT = "text"
    URL = "url"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    COLOR = "color"
    LIST = "list"


@dataclass
class EditorField:
    """One editable option of a widget."""
    name: str
    label: str
    kind: FieldKind = FieldKind.STRING
    options: List[str] = field(default_factory=list)
    help_text: str = ""
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def coerce(self, value: Any) -> Any:
        """
        Convert a submitted value to the field's type.

        Raises:
            ValueError: If the value cannot be represented by this field
        """
        if self.kind == FieldKind.BOOLEAN:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.lower() in ("true", "1", "on", "yes"):
                return True
            if isinstance(value, str) and value.lower() in ("false", "0", "off", "no", ""):
                return False
            raise ValueError(f"{self.name}: expected a boolean")

        if self.kind == FieldKind.NUMBER:
            if isinstance(value, bool):
                raise ValueError(f"{self.name}: expected a number")
            try:
                number = float(value)
            except (TypeError, ValueError, OverflowError) as e:
                raise ValueError(f"{self.name}: expected a number") from e
            if not math.isfinite(number):
                raise ValueError(f"{self.name}: expected a finite number")
            if self.minimum is not None:
                number = max(self.minimum, number)
            if self.maximum is not None:
                number = min(self.maximum, number)
            return int(number) if float(number).is_integer() else number

        if self.kind == FieldKind.SELECT:
            if value not in self.options:
                raise ValueError(f"{self.name}: must be one of {', '.join(self.options)}")
            return value

        if self.kind == FieldKind.LIST:
            if not isinstance(value, list):
                raise ValueError(f"{self.name}: expected a list")
            return value

        if value is None:
            return ""
        return str(value).strip() if self.kind == FieldKind.URL else str(value)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "label": self.label, "kind": self.kind.value}
        if self.options:
            data["options"] = list(self.options)
        if self.help_text:
            data["help_text"] = self.help_text
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.maximum is not None:
            data["maximum"] = self.maximum
        return data


@dataclass
class EditorForm:
    """
    Editable view of one widget instance.

    Attributes:
        fields: Editable options, in display order
        values: Current value for each field
        on_change: Callback receiving the config patch on submit
    """
    fields: List[EditorField]
    values: Dict[str, Any]
    on_change: ChangeCallback

    def submit(self, submitted: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate submitted values and forward them as a patch.

        Only keys that name a field of this form are kept, so a submit for
        one field never touches the others.

        Returns:
            The patch that was forwarded to on_change

        Raises:
            ValueError: If a submitted value does not fit its field
        """
        by_name = {f.name: f for f in self.fields}
        patch: Dict[str, Any] = {}
        for name, value in submitted.items():
            editor_field = by_name.get(name)
            if editor_field is None:
                logger.debug(f"Ignoring unknown editor field '{name}'")
                continue
            patch[name] = editor_field.coerce(value)

        if patch:
            self.values.update(patch)
            self.on_change(dict(patch))
        return patch

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": [f.to_dict() for f in self.fields],
            "values": dict(self.values),
        }


def schema_editor(fields: List[EditorField]) -> Callable[[Dict[str, Any], ChangeCallback], EditorForm]:
    """
    Build an editor capability from a list of fields.

    The returned function reads current values from the instance config
    (missing keys show as None) and binds the change callback.
    """
    def editor(config: Dict[str, Any], on_change: ChangeCallback) -> EditorForm:
        values = {f.name: config.get(f.name) for f in fields}
        return EditorForm(fields=list(fields), values=values, on_change=on_change)

    return editor
