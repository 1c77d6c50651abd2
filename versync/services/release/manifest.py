"""Manifest synchronizer: plugin.xml's `<plugin version="...">`."""

from __future__ import annotations

from pathlib import Path

from versync.core.result import Err, Ok, Result
from versync.platform.files import atomic_write_text
from versync.services.release.errors import (
    FileWriteFailed,
    ManifestNotFound,
    ManifestParseError,
    ManifestSchemaError,
    ReleaseError,
)
from versync.services.release.manifest_xml import (
    ManifestDocument,
    XmlDoctype,
    XmlElement,
    parse_manifest,
    serialize_manifest,
)

PLUGIN_ELEMENT = "plugin"
VERSION_ATTRIBUTE = "version"


def load_manifest(path: Path) -> Result[tuple[ManifestDocument, bytes], ReleaseError]:
    """Read and parse the manifest; returns the document and the raw bytes read."""
    if not path.is_file():
        return Err(ManifestNotFound(path=path))

    try:
        raw = path.read_bytes()
    except OSError as e:
        return Err(ManifestParseError(path=path, reason=f"cannot read file: {e}"))

    parsed = parse_manifest(raw)
    if isinstance(parsed, Err):
        e = parsed.error
        return Err(ManifestParseError(path=path, reason=e.message, line=e.line, column=e.column))

    # The internal subset is not kept and its entities are expanded into the text.
    for node in parsed.value.nodes:
        if isinstance(node, XmlDoctype) and node.internal_subset:
            return Err(
                ManifestSchemaError(
                    path=path,
                    reason="DOCTYPE with an internal subset is not supported",
                )
            )
    return Ok((parsed.value, raw))


def plugin_element(document: ManifestDocument, path: Path) -> Result[XmlElement, ReleaseError]:
    element = document.find_first(PLUGIN_ELEMENT)
    if element is None:
        return Err(
            ManifestSchemaError(
                path=path,
                reason=f"no top-level <{PLUGIN_ELEMENT}> element",
            )
        )
    return Ok(element)


def read_manifest_version(path: Path) -> Result[str | None, ReleaseError]:
    """Current `version` attribute of the plugin element (None when unset)."""
    loaded = load_manifest(path)
    if isinstance(loaded, Err):
        return loaded
    element = plugin_element(loaded.value[0], path)
    if isinstance(element, Err):
        return element
    return Ok(element.value.attributes.get(VERSION_ATTRIBUTE))


def render_manifest(document: ManifestDocument) -> bytes:
    return (serialize_manifest(document) + "\n").encode(document.encoding)


def sync_manifest(path: Path, version: str, *, dry_run: bool = False) -> Result[bool, ReleaseError]:
    """Set the plugin element's version and write the manifest back.

    Returns:
        Ok(True) when the file content changed (or would change in dry run)
        Ok(False) when it was already identical
        Err(ManifestNotFound | ManifestParseError | ManifestSchemaError | FileWriteFailed)
    """
    loaded = load_manifest(path)
    if isinstance(loaded, Err):
        return loaded
    document, raw = loaded.value

    element = plugin_element(document, path)
    if isinstance(element, Err):
        return element
    element.value.attributes[VERSION_ATTRIBUTE] = version

    try:
        rendered = render_manifest(document)
    except (LookupError, UnicodeEncodeError) as e:
        return Err(FileWriteFailed(path=path, reason=f"cannot encode manifest: {e}"))

    if rendered == raw:
        return Ok(False)
    if dry_run:
        return Ok(True)

    try:
        atomic_write_text(path, rendered.decode(document.encoding), encoding=document.encoding)
    except OSError as e:
        return Err(FileWriteFailed(path=path, reason=str(e)))
    return Ok(True)
