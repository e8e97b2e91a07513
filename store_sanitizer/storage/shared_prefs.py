"""
Android SharedPreferences XML store.

Reads and writes the ``<map>`` document a platform preference store keeps on
disk (e.g. ``shared_prefs/FlutterSharedPreferences.xml``)::

    <?xml version='1.0' encoding='utf-8' standalone='yes' ?>
    <map>
        <string name="flutter.token">abc</string>
        <boolean name="flutter.onboarded" value="true" />
        <int name="flutter.launches" value="3" />
        <set name="flutter.tags"><string>a</string></set>
    </map>

Sequences are written as ``<set>`` and therefore read back sorted and without
duplicates.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Any

from ..core.exceptions import ValidationError
from ..models.store import StoreValue
from .local import FileBackedStore

XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' standalone='yes' ?>\n"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# characters outside the XML 1.0 Char production
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def _parse_bool(raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValueError(f"Invalid boolean value {raw!r}")


class SharedPreferencesStore(FileBackedStore):
    """Store persisted in the Android SharedPreferences XML format."""

    @staticmethod
    def validate_entry(key: str, value: Any) -> StoreValue:
        """Reject keys and strings that cannot appear in an XML 1.0 document."""
        value = FileBackedStore.validate_entry(key, value)
        texts = value if isinstance(value, list) else [value]
        for text in [key, *texts]:
            if isinstance(text, str) and _XML_ILLEGAL.search(text):
                raise ValidationError(
                    message=f"Character not allowed in XML for key {key!r}",
                    field_name=key,
                    expected_type="XML 1.0 text",
                    actual_value=text,
                )
        return value

    def decode(self, raw: bytes) -> dict[str, StoreValue]:
        # ET.ParseError subclasses SyntaxError, not ValueError
        try:
            root = ET.fromstring(raw)
        except ET.ParseError as exc:
            raise ValueError(f"Invalid XML: {exc}") from exc

        if root.tag != "map":
            raise ValueError(f"Expected <map> root element, got <{root.tag}>")

        entries: dict[str, StoreValue] = {}
        for child in root:
            name = child.get("name")
            if not name:
                raise ValueError(f"<{child.tag}> element without a name attribute")
            if child.tag == "null":
                continue
            entries[name] = self._decode_element(child)
        return entries

    @staticmethod
    def _decode_element(element: ET.Element) -> StoreValue:
        tag = element.tag
        if tag == "string":
            return element.text or ""
        if tag == "set":
            return sorted({item.text or "" for item in element if item.tag == "string"})

        value = element.get("value")
        if value is None:
            raise ValueError(f"<{tag} name={element.get('name')!r}> has no value attribute")
        if tag == "boolean":
            return _parse_bool(value)
        if tag in ("int", "long"):
            return int(value)
        if tag == "float":
            return float(value)
        raise ValueError(f"Unknown element <{tag}>")

    def encode(self, entries: dict[str, StoreValue]) -> bytes:
        root = ET.Element("map")
        for key in sorted(entries):
            value = entries[key]
            if isinstance(value, bool):
                ET.SubElement(root, "boolean", name=key, value="true" if value else "false")
            elif isinstance(value, int):
                tag = "int" if INT32_MIN <= value <= INT32_MAX else "long"
                ET.SubElement(root, tag, name=key, value=str(value))
            elif isinstance(value, float):
                ET.SubElement(root, "float", name=key, value=repr(value))
            elif isinstance(value, str):
                ET.SubElement(root, "string", name=key).text = value
            else:
                element = ET.SubElement(root, "set", name=key)
                for item in sorted(set(value)):
                    ET.SubElement(element, "string").text = item

        ET.indent(root, space="    ")
        body = ET.tostring(root, encoding="unicode", short_empty_elements=True)
        return (XML_DECLARATION + body + "\n").encode("utf-8")
