from typing import Optional
from app.common.enums import ResourceType


class InvalidationEvent:
    """
    A completed write on a blog resource.
    Built by the write path and consumed immediately by CacheInvalidation; never stored.
    """
    def __init__(
        self,
        resource_type: ResourceType,
        resource_id: Optional[str] = None
    ):
        self.resource_type = ResourceType(resource_type)
        self.resource_id = resource_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidationEvent):
            return NotImplemented
        return (
            self.resource_type == other.resource_type
            and self.resource_id == other.resource_id
        )

    def __hash__(self) -> int:
        return hash((self.resource_type, self.resource_id))

    def __repr__(self) -> str:
        return f"<InvalidationEvent(type={self.resource_type.value}, id={self.resource_id})>"
