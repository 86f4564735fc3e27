"""OPS_envelope encoding

Every OpenSRS request is the same envelope::

    <OPS_envelope>
      <header><version>0.9</version></header>
      <body><data_block><dt_assoc>
        <item key="protocol">XCP</item>
        <item key="action">LOOKUP</item>
        <item key="object">DOMAIN</item>
        <item key="attributes"><dt_assoc>...</dt_assoc></item>
      </dt_assoc></data_block></body>
    </OPS_envelope>

Mappings are encoded as ``dt_assoc``, sequences as ``dt_array`` with
zero-based keys and scalars as item text.
"""
import xml.etree.ElementTree as ET
from typing import Any, Dict, Optional

XML_DECLARATION = "<?xml version='1.0' encoding='UTF-8' standalone='no' ?>"
DOCTYPE = "<!DOCTYPE OPS_envelope SYSTEM 'ops.dtd'>"
PROTOCOL_VERSION = "0.9"


def scalar_text(value: Any) -> str:
    """Render a scalar the way OpenSRS expects it"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def encode_value(parent: ET.Element, value: Any):
    """Encode ``value`` as the content of ``parent``"""
    if isinstance(value, dict):
        assoc = ET.SubElement(parent, "dt_assoc")
        for key, item_value in value.items():
            item = ET.SubElement(assoc, "item", key=str(key))
            encode_value(item, item_value)
    elif isinstance(value, (list, tuple)):
        array = ET.SubElement(parent, "dt_array")
        for index, item_value in enumerate(value):
            item = ET.SubElement(array, "item", key=str(index))
            encode_value(item, item_value)
    else:
        parent.text = scalar_text(value)


def build_envelope(
    action: str,
    object_type: str,
    attributes: Optional[Dict[str, Any]] = None,
    domain: Optional[str] = None,
) -> str:
    """Build a complete OPS_envelope request document.

    ``domain`` is placed next to ``action``/``object`` in the outer block,
    which some commands (advanced_update_nameservers) require.
    """
    root = ET.Element("OPS_envelope")

    header = ET.SubElement(root, "header")
    version = ET.SubElement(header, "version")
    version.text = PROTOCOL_VERSION

    body = ET.SubElement(root, "body")
    data_block = ET.SubElement(body, "data_block")
    block = ET.SubElement(data_block, "dt_assoc")

    for key, value in (("protocol", "XCP"), ("action", action), ("object", object_type)):
        item = ET.SubElement(block, "item", key=key)
        item.text = value

    if domain:
        item = ET.SubElement(block, "item", key="domain")
        item.text = domain

    item = ET.SubElement(block, "item", key="attributes")
    encode_value(item, attributes or {})

    xml_body = ET.tostring(root, encoding="unicode")
    return f"{XML_DECLARATION}\n{DOCTYPE}\n{xml_body}"
