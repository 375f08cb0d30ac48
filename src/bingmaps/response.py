"""Response envelope shared by every Bing Maps REST endpoint.

Every successful response wraps its typed resources in two layers::

    {"resourceSets": [{"estimatedTotal": 1, "resources": [...]}], ...}
"""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ResourceSet(BaseModel, Generic[T]):
    """Resources returned by one logical query.

    Attributes:
        estimated_total: Number of resources the service reports, if given.
        resources: Typed resources in the order the service returned them.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    estimated_total: Optional[int] = Field(None, alias="estimatedTotal")
    resources: List[T] = Field(default_factory=list)


class ResponseEnvelope(BaseModel, Generic[T]):
    """Outer response object.

    A missing ``resourceSets`` array decodes as an empty list, the same as an
    explicit ``[]``.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    authentication_result_code: Optional[str] = Field(None, alias="authenticationResultCode")
    brand_logo_uri: Optional[str] = Field(None, alias="brandLogoUri")
    copyright: Optional[str] = None
    error_details: List[str] = Field(default_factory=list, alias="errorDetails")
    status_code: Optional[int] = Field(None, alias="statusCode")
    status_description: Optional[str] = Field(None, alias="statusDescription")
    trace_id: Optional[str] = Field(None, alias="traceId")
    resource_sets: List[ResourceSet[T]] = Field(default_factory=list, alias="resourceSets")


def flatten_first(envelope: ResponseEnvelope[T]) -> List[T]:
    """Return the resources of the first result set, or an empty list."""
    if not envelope.resource_sets:
        return []
    return list(envelope.resource_sets[0].resources)


__all__ = ["ResourceSet", "ResponseEnvelope", "flatten_first"]
