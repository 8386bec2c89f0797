from __future__ import annotations

from typing import Any, ClassVar, Protocol, TypeVar

from .payload import Payload

R_co = TypeVar("R_co", covariant=True)


class Method(Protocol[R_co]):
    """One remote operation.

    ``response_type`` is the type the ``result`` field is decoded into; any
    type ``msgspec.convert`` accepts works, including ``list[Update]``.
    """

    response_type: ClassVar[Any]

    def into_payload(self) -> Payload: ...
