"""
Reducible annotation registry and the raw-annotation finalization pass.

Annotations are registered explicitly under the raw INFO key they consume.
Several annotations may share one raw key (AS_FS and AS_SOR both read
AS_SB_TABLE); each receives the original record, so the order in which they
run does not matter.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Protocol, runtime_checkable

from ..models.builders import RecordBuilder
from ..models.core import VariantRecord
from ..utils.logging import TRACE
from .allele_specific import standard_allele_specific_annotations

logger = logging.getLogger(__name__)


@runtime_checkable
class ReducibleAnnotation(Protocol):
    """An annotation finalized from raw per-allele partial statistics."""

    raw_key: str

    def accepts(self, raw_value: Any) -> bool: ...

    def finalize_raw_data(self, current: VariantRecord, original: VariantRecord) -> dict[str, Any]: ...


class AnnotationRegistry:
    """Raw INFO key -> annotations that finalize it."""

    def __init__(self, annotations: Iterable[Any] = ()):
        self._by_raw_key: dict[str, list[Any]] = {}
        for annotation in annotations:
            self.register(annotation)

    def register(self, annotation: Any) -> None:
        raw_key = getattr(annotation, "raw_key", None)
        if not isinstance(raw_key, str) or not raw_key:
            raise TypeError(f"Annotation {annotation!r} does not declare a raw_key")
        self._by_raw_key.setdefault(raw_key, []).append(annotation)

    def raw_keys(self) -> list[str]:
        return list(self._by_raw_key)

    def annotations_for(self, raw_key: str) -> list[Any]:
        return list(self._by_raw_key.get(raw_key, ()))

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        for raw_key, annotations in self._by_raw_key.items():
            for annotation in annotations:
                yield raw_key, annotation

    def __contains__(self, raw_key: object) -> bool:
        return raw_key in self._by_raw_key

    def __len__(self) -> int:
        return sum(len(a) for a in self._by_raw_key.values())


def default_registry() -> AnnotationRegistry:
    """Registry of the standard allele-specific annotations."""
    return AnnotationRegistry(standard_allele_specific_annotations())


class RawAnnotationFinalizer:
    """
    Replaces raw reducible-annotation fields with their finalized values.

    In strip mode the raw fields are removed and nothing is computed in their
    place, which keeps output small when the finalized values are not needed.
    """

    def __init__(self, registry: AnnotationRegistry | None = None, strip: bool = False):
        self.registry = registry if registry is not None else default_registry()
        self.strip = strip

    def apply(self, builder: RecordBuilder, original: VariantRecord) -> RecordBuilder:
        for raw_key, annotation in self.registry:
            if not original.has_attribute(raw_key):
                continue
            raw_value = original.attributes[raw_key]
            # entries that cannot handle this raw value are left alone; the raw key stays
            if not isinstance(annotation, ReducibleAnnotation) or not annotation.accepts(raw_value):
                logger.log(
                    TRACE,
                    "Ignoring %r for %s at %s: raw value of type %s not supported",
                    annotation,
                    raw_key,
                    original.locus,
                    type(raw_value).__name__,
                )
                continue
            builder.rm_attribute(raw_key)
            if self.strip:
                continue
            final_values = annotation.finalize_raw_data(builder.make(), original)
            for key, value in final_values.items():
                builder.attribute(key, value)
        return builder
