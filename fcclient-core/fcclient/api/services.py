import dataclasses
from typing import Dict, List, Optional, Tuple

from fcclient.constants import HEADER_IF_MATCH, TAG_QUERY_PREFIX

from .core import (
    LOCATION_HEADER,
    LOCATION_URI,
    ListInput,
    RequestInput,
    ResponseOutput,
    Shape,
    member,
)


@dataclasses.dataclass(frozen=True)
class LogConfig(Shape):
    project: Optional[str] = None
    logstore: Optional[str] = None
    enable_request_metrics: Optional[bool] = None

    def with_project(self, project: str) -> "LogConfig":
        return self._replace(project=project)

    def with_logstore(self, logstore: str) -> "LogConfig":
        return self._replace(logstore=logstore)

    def with_enable_request_metrics(self, enable: bool) -> "LogConfig":
        return self._replace(enable_request_metrics=enable)


@dataclasses.dataclass(frozen=True)
class VPCConfig(Shape):
    vpc_id: Optional[str] = None
    v_switch_ids: Optional[List[str]] = member(name="vSwitchIds")
    security_group_id: Optional[str] = None

    def with_vpc_id(self, vpc_id: str) -> "VPCConfig":
        return self._replace(vpc_id=vpc_id)

    def with_v_switch_ids(self, *v_switch_ids: str) -> "VPCConfig":
        return self._replace(v_switch_ids=list(v_switch_ids))

    def with_security_group_id(self, security_group_id: str) -> "VPCConfig":
        return self._replace(security_group_id=security_group_id)


@dataclasses.dataclass(frozen=True)
class NASMountConfig(Shape):
    server_addr: Optional[str] = None
    mount_dir: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class NASConfig(Shape):
    user_id: Optional[int] = None
    group_id: Optional[int] = None
    mount_points: Optional[List[NASMountConfig]] = member(shape=NASMountConfig)

    def with_user_id(self, user_id: int) -> "NASConfig":
        return self._replace(user_id=user_id)

    def with_group_id(self, group_id: int) -> "NASConfig":
        return self._replace(group_id=group_id)

    def with_mount_points(self, *mount_points: NASMountConfig) -> "NASConfig":
        return self._replace(mount_points=list(mount_points))


@dataclasses.dataclass(frozen=True)
class ServiceMetadata(Shape):
    service_name: Optional[str] = None
    service_id: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None
    log_config: Optional[LogConfig] = member(shape=LogConfig)
    vpc_config: Optional[VPCConfig] = member(shape=VPCConfig)
    nas_config: Optional[NASConfig] = member(shape=NASConfig)
    internet_access: Optional[bool] = None
    created_time: Optional[str] = None
    last_modified_time: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class _ServiceAttributesInput(RequestInput):
    """The mutable attributes of a service, shared by create and update."""

    _: dataclasses.KW_ONLY
    description: Optional[str] = None
    role: Optional[str] = None
    log_config: Optional[LogConfig] = member(shape=LogConfig)
    vpc_config: Optional[VPCConfig] = member(shape=VPCConfig)
    nas_config: Optional[NASConfig] = member(shape=NASConfig)
    internet_access: Optional[bool] = None

    def with_description(self, description: str):
        return self._replace(description=description)

    def with_role(self, role: str):
        return self._replace(role=role)

    def with_log_config(self, log_config: LogConfig):
        return self._replace(log_config=log_config)

    def with_vpc_config(self, vpc_config: VPCConfig):
        return self._replace(vpc_config=vpc_config)

    def with_nas_config(self, nas_config: NASConfig):
        return self._replace(nas_config=nas_config)

    def with_internet_access(self, internet_access: bool):
        return self._replace(internet_access=internet_access)


@dataclasses.dataclass(frozen=True)
class CreateServiceInput(_ServiceAttributesInput):
    http_method = "POST"
    request_uri = "/services"

    service_name: Optional[str] = None

    def with_service_name(self, service_name: str) -> "CreateServiceInput":
        return self._replace(service_name=service_name)


@dataclasses.dataclass(frozen=True)
class CreateServiceOutput(ServiceMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class GetServiceInput(RequestInput):
    request_uri = "/services/{service_name}"

    service_name: str = member(location=LOCATION_URI)
    qualifier: Optional[str] = member(location=LOCATION_URI, default=None)

    def with_qualifier(self, qualifier: str) -> "GetServiceInput":
        return self._replace(qualifier=qualifier)

    def _uri_params(self, params):
        return _qualified_service(params)


@dataclasses.dataclass(frozen=True)
class GetServiceOutput(ServiceMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class UpdateServiceInput(_ServiceAttributesInput):
    http_method = "PUT"
    request_uri = "/services/{service_name}"

    service_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "UpdateServiceInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class UpdateServiceOutput(ServiceMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class DeleteServiceInput(RequestInput):
    http_method = "DELETE"
    request_uri = "/services/{service_name}"

    service_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "DeleteServiceInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class DeleteServiceOutput(ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class ListServicesInput(ListInput):
    """Lists services, optionally filtered by tags. A service matches if it carries every given tag."""

    request_uri = "/services"

    tags: Optional[Dict[str, str]] = member(location=None, kw_only=True)

    def with_tags(self, tags: Dict[str, str]) -> "ListServicesInput":
        return self._replace(tags=dict(tags))

    def with_tag(self, key: str, value: str) -> "ListServicesInput":
        tags = dict(self.tags or {})
        tags[key] = value
        return self._replace(tags=tags)

    def _query_params(self, params: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        for key, value in (self.tags or {}).items():
            params.append((f"{TAG_QUERY_PREFIX}{key}", value))
        return params


@dataclasses.dataclass(frozen=True)
class ListServicesOutput(ResponseOutput):
    services: List[ServiceMetadata] = member(shape=ServiceMetadata, default_factory=list)
    next_token: Optional[str] = None


def _qualified_service(params):
    params = dict(params)
    qualifier = params.pop("qualifier", None)
    if qualifier:
        params["service_name"] = f"{params['service_name']}.{qualifier}"
    return params
