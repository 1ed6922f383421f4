import dataclasses
from typing import Dict, List, Optional

from .core import LOCATION_QUERY, RequestInput, ResponseOutput, member


@dataclasses.dataclass(frozen=True)
class TagResourceInput(RequestInput):
    """Adds tags to a resource. Existing tags with the same keys are overwritten."""

    http_method = "POST"
    request_uri = "/tag"

    resource_arn: str = None
    tags: Optional[Dict[str, str]] = None

    def with_tags(self, tags: Dict[str, str]) -> "TagResourceInput":
        return self._replace(tags=dict(tags))

    def with_tag(self, key: str, value: str) -> "TagResourceInput":
        tags = dict(self.tags or {})
        tags[key] = value
        return self._replace(tags=tags)


@dataclasses.dataclass(frozen=True)
class TagResourceOutput(ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class UnTagResourceInput(RequestInput):
    """Removes the given tag keys from a resource, or all of its tags with ``with_all(True)``."""

    http_method = "DELETE"
    request_uri = "/tag"

    resource_arn: str = None
    tag_keys: Optional[List[str]] = None
    all: Optional[bool] = None

    def with_tag_keys(self, tag_keys: List[str]) -> "UnTagResourceInput":
        return self._replace(tag_keys=list(tag_keys))

    def with_all(self, all: bool) -> "UnTagResourceInput":
        return self._replace(all=all)


@dataclasses.dataclass(frozen=True)
class UnTagResourceOutput(ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class GetResourceTagsInput(RequestInput):
    request_uri = "/tag"

    resource_arn: str = member(location=LOCATION_QUERY)


@dataclasses.dataclass(frozen=True)
class GetResourceTagsOutput(ResponseOutput):
    """The tags of a resource. ``resource_arn`` is always the full ARN, even if the request used a short one."""

    resource_arn: Optional[str] = None
    tags: Dict[str, str] = dataclasses.field(default_factory=dict)
