"""
Typed views of the Microsoft Graph drive item payloads used by the adapter.

Only the fields the adapter reads are modelled; everything else is ignored.
Fields are optional at this layer so that the storage provider can decide
which absences are protocol violations for the operation at hand.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vaultsync.errors import ProtocolViolationError


class ParentReference(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: Optional[str] = None


class DriveItem(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    e_tag: Optional[str] = Field(default=None, alias="eTag")
    download_url: Optional[str] = Field(default=None, alias="@microsoft.graph.downloadUrl")
    folder: Optional[Dict[str, Any]] = None
    parent_reference: Optional[ParentReference] = Field(default=None, alias="parentReference")

    @property
    def is_folder(self) -> bool:
        return self.folder is not None


class DriveItemCollection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Raw entries; each named entry is validated as a DriveItem by the caller
    value: List[Any]


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_payload(model: Type[ModelT], body: Any, path: Optional[str] = None, phase: Optional[str] = None) -> ModelT:
    """Validate a decoded JSON body, raising ProtocolViolationError on mismatch."""
    if not isinstance(body, dict):
        raise ProtocolViolationError(f"unexpected response body: {type(body).__name__}", path=path, phase=phase)
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ProtocolViolationError(f"malformed {model.__name__}: {exc.error_count()} error(s)", path=path, phase=phase) from exc
