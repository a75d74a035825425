"""
Manifest Parsing

Splits a multi-document YAML manifest into ResourceObjects. Empty documents
are skipped and "List" documents are expanded into their items.
"""

from typing import Any, Iterator
import yaml
from rewind.domain.errors import ManifestError
from rewind.domain.value_objects.resource_object import ObjectSet, ResourceObject


def parse_manifest(manifest: str, default_namespace: str = "") -> ObjectSet:
    try:
        documents = list(yaml.safe_load_all(manifest or ""))
    except yaml.YAMLError as e:
        raise ManifestError(f"invalid YAML: {e}") from e

    objects = []
    for index, document in enumerate(documents):
        for body in _expand(document, index):
            objects.append(_to_object(body, index, default_namespace))
    return ObjectSet.of(objects)


def _expand(document: Any, index: int) -> Iterator[dict]:
    if document is None:
        return
    if not isinstance(document, dict):
        raise ManifestError(f"document {index} is not a mapping")
    if str(document.get("kind", "")).endswith("List") and "items" in document:
        for item in document.get("items") or []:
            if not isinstance(item, dict):
                raise ManifestError(f"document {index} has a non-mapping list item")
            yield item
        return
    yield document


def _to_object(body: dict, index: int, default_namespace: str) -> ResourceObject:
    if not body.get("kind"):
        raise ManifestError(f"document {index} has no kind")
    metadata = body.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ManifestError(f"document {index} ({body['kind']}) has a non-mapping metadata")
    if not metadata.get("name"):
        raise ManifestError(f"document {index} ({body['kind']}) has no metadata.name")
    return ResourceObject.from_body(body, default_namespace)
