"""
Triggers and their configurations.

The configuration of a trigger depends on its type. Every supported type has one ``TriggerConfig`` subclass, and
``parse_trigger_config`` decodes a configuration document into the class registered for a trigger type, the
documents of other trigger types are kept as an ``UnknownTriggerConfig``. A configuration of one class never stands
in for another: attaching it to a trigger of a different type, or asking a trigger for the wrong class, raises a
``TriggerTypeMismatchError``.
"""
import dataclasses
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar

from fcclient.constants import (
    HEADER_IF_MATCH,
    TRIGGER_TYPE_EVENTBRIDGE,
    TRIGGER_TYPE_HTTP,
    TRIGGER_TYPE_LOG,
    TRIGGER_TYPE_OSS,
)

from .core import (
    LOCATION_HEADER,
    LOCATION_URI,
    ListInput,
    RequestInput,
    ResponseOutput,
    Shape,
    TriggerTypeMismatchError,
    member,
)

C = TypeVar("C", bound="TriggerConfig")


class TriggerConfig(Shape):
    """Base class of trigger configurations."""

    trigger_type: ClassVar[str]


# OSS


@dataclasses.dataclass(frozen=True)
class OSSTriggerKey(Shape):
    prefix: Optional[str] = None
    suffix: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class OSSTriggerFilter(Shape):
    key: Optional[OSSTriggerKey] = member(shape=OSSTriggerKey)


@dataclasses.dataclass(frozen=True)
class OSSTriggerConfig(TriggerConfig):
    trigger_type = TRIGGER_TYPE_OSS

    events: Optional[List[str]] = None
    filter: Optional[OSSTriggerFilter] = member(shape=OSSTriggerFilter)

    def with_events(self, events: List[str]) -> "OSSTriggerConfig":
        return self._replace(events=list(events))

    def with_filter(self, filter: OSSTriggerFilter) -> "OSSTriggerConfig":
        return self._replace(filter=filter)

    def _key(self) -> OSSTriggerKey:
        if self.filter and self.filter.key:
            return self.filter.key
        return OSSTriggerKey()

    def with_filter_key_prefix(self, prefix: str) -> "OSSTriggerConfig":
        key = self._key()._replace(prefix=prefix)
        return self._replace(filter=OSSTriggerFilter(key=key))

    def with_filter_key_suffix(self, suffix: str) -> "OSSTriggerConfig":
        key = self._key()._replace(suffix=suffix)
        return self._replace(filter=OSSTriggerFilter(key=key))


# Log service


@dataclasses.dataclass(frozen=True)
class SourceConfig(Shape):
    logstore: Optional[str] = None

    def with_logstore(self, logstore: str) -> "SourceConfig":
        return self._replace(logstore=logstore)


@dataclasses.dataclass(frozen=True)
class JobConfig(Shape):
    max_retry_time: Optional[int] = None
    trigger_interval: Optional[int] = None

    def with_max_retry_time(self, max_retry_time: int) -> "JobConfig":
        return self._replace(max_retry_time=max_retry_time)

    def with_trigger_interval(self, trigger_interval: int) -> "JobConfig":
        return self._replace(trigger_interval=trigger_interval)


@dataclasses.dataclass(frozen=True)
class JobLogConfig(Shape):
    project: Optional[str] = None
    logstore: Optional[str] = None

    def with_project(self, project: str) -> "JobLogConfig":
        return self._replace(project=project)

    def with_logstore(self, logstore: str) -> "JobLogConfig":
        return self._replace(logstore=logstore)


@dataclasses.dataclass(frozen=True)
class LogTriggerConfig(TriggerConfig):
    trigger_type = TRIGGER_TYPE_LOG

    source_config: Optional[SourceConfig] = member(shape=SourceConfig)
    job_config: Optional[JobConfig] = member(shape=JobConfig)
    function_parameter: Optional[Dict[str, Any]] = None
    log_config: Optional[JobLogConfig] = member(shape=JobLogConfig)
    enable: Optional[bool] = None

    def with_source_config(self, source_config: SourceConfig) -> "LogTriggerConfig":
        return self._replace(source_config=source_config)

    def with_job_config(self, job_config: JobConfig) -> "LogTriggerConfig":
        return self._replace(job_config=job_config)

    def with_function_parameter(self, function_parameter: Dict[str, Any]) -> "LogTriggerConfig":
        return self._replace(function_parameter=dict(function_parameter))

    def with_log_config(self, log_config: JobLogConfig) -> "LogTriggerConfig":
        return self._replace(log_config=log_config)

    def with_enable(self, enable: bool) -> "LogTriggerConfig":
        return self._replace(enable=enable)


# HTTP


@dataclasses.dataclass(frozen=True)
class HTTPTriggerConfig(TriggerConfig):
    trigger_type = TRIGGER_TYPE_HTTP

    auth_type: Optional[str] = None
    methods: Optional[List[str]] = None

    def with_auth_type(self, auth_type: str) -> "HTTPTriggerConfig":
        return self._replace(auth_type=auth_type)

    def with_methods(self, *methods: str) -> "HTTPTriggerConfig":
        return self._replace(methods=list(methods))


# EventBridge


class EventSourceType(str):
    Default = "Default"
    MNS = "MNS"
    RocketMQ = "RocketMQ"
    RabbitMQ = "RabbitMQ"


@dataclasses.dataclass(frozen=True)
class SourceMNSParameters(Shape):
    region_id: Optional[str] = member(name="RegionId")
    queue_name: Optional[str] = member(name="QueueName")
    is_base64_decode: Optional[bool] = member(name="IsBase64Decode")

    def with_region_id(self, region_id: str) -> "SourceMNSParameters":
        return self._replace(region_id=region_id)

    def with_queue_name(self, queue_name: str) -> "SourceMNSParameters":
        return self._replace(queue_name=queue_name)

    def with_is_base64_decode(self, is_base64_decode: bool) -> "SourceMNSParameters":
        return self._replace(is_base64_decode=is_base64_decode)


@dataclasses.dataclass(frozen=True)
class SourceRocketMQParameters(Shape):
    region_id: Optional[str] = member(name="RegionId")
    instance_id: Optional[str] = member(name="InstanceId")
    topic: Optional[str] = member(name="Topic")
    tag: Optional[str] = member(name="Tag")
    offset: Optional[str] = member(name="Offset")
    group_id: Optional[str] = member(name="GroupID")
    timestamp: Optional[int] = member(name="Timestamp")

    def with_region_id(self, region_id: str) -> "SourceRocketMQParameters":
        return self._replace(region_id=region_id)

    def with_instance_id(self, instance_id: str) -> "SourceRocketMQParameters":
        return self._replace(instance_id=instance_id)

    def with_topic(self, topic: str) -> "SourceRocketMQParameters":
        return self._replace(topic=topic)

    def with_tag(self, tag: str) -> "SourceRocketMQParameters":
        return self._replace(tag=tag)

    def with_offset(self, offset: str) -> "SourceRocketMQParameters":
        return self._replace(offset=offset)

    def with_group_id(self, group_id: str) -> "SourceRocketMQParameters":
        return self._replace(group_id=group_id)

    def with_timestamp(self, timestamp: int) -> "SourceRocketMQParameters":
        return self._replace(timestamp=timestamp)


@dataclasses.dataclass(frozen=True)
class SourceRabbitMQParameters(Shape):
    region_id: Optional[str] = member(name="RegionId")
    instance_id: Optional[str] = member(name="InstanceId")
    virtual_host_name: Optional[str] = member(name="VirtualHostName")
    queue_name: Optional[str] = member(name="QueueName")

    def with_region_id(self, region_id: str) -> "SourceRabbitMQParameters":
        return self._replace(region_id=region_id)

    def with_instance_id(self, instance_id: str) -> "SourceRabbitMQParameters":
        return self._replace(instance_id=instance_id)

    def with_virtual_host_name(self, virtual_host_name: str) -> "SourceRabbitMQParameters":
        return self._replace(virtual_host_name=virtual_host_name)

    def with_queue_name(self, queue_name: str) -> "SourceRabbitMQParameters":
        return self._replace(queue_name=queue_name)


@dataclasses.dataclass(frozen=True)
class EventSourceParameters(Shape):
    source_mns_parameters: Optional[SourceMNSParameters] = member(
        name="sourceMNSParameters", shape=SourceMNSParameters
    )
    source_rocketmq_parameters: Optional[SourceRocketMQParameters] = member(
        name="sourceRocketMQParameters", shape=SourceRocketMQParameters
    )
    source_rabbitmq_parameters: Optional[SourceRabbitMQParameters] = member(
        name="sourceRabbitMQParameters", shape=SourceRabbitMQParameters
    )

    def with_source_mns_parameters(self, parameters: SourceMNSParameters) -> "EventSourceParameters":
        return self._replace(source_mns_parameters=parameters)

    def with_source_rocketmq_parameters(
        self, parameters: SourceRocketMQParameters
    ) -> "EventSourceParameters":
        return self._replace(source_rocketmq_parameters=parameters)

    def with_source_rabbitmq_parameters(
        self, parameters: SourceRabbitMQParameters
    ) -> "EventSourceParameters":
        return self._replace(source_rabbitmq_parameters=parameters)


@dataclasses.dataclass(frozen=True)
class EventSourceConfig(Shape):
    event_source_type: Optional[str] = None
    event_source_parameters: Optional[EventSourceParameters] = member(shape=EventSourceParameters)

    def with_event_source_type(self, event_source_type: str) -> "EventSourceConfig":
        return self._replace(event_source_type=event_source_type)

    def with_event_source_parameters(
        self, parameters: EventSourceParameters
    ) -> "EventSourceConfig":
        return self._replace(event_source_parameters=parameters)


@dataclasses.dataclass(frozen=True)
class EventBridgeTriggerConfig(TriggerConfig):
    """
    Configuration of an EventBridge trigger. The filter pattern is an opaque JSON string, it is passed to the
    service without interpretation.
    """

    trigger_type = TRIGGER_TYPE_EVENTBRIDGE

    trigger_enable: Optional[bool] = None
    async_invocation_type: Optional[bool] = None
    event_rule_filter_pattern: Optional[str] = None
    event_source_config: Optional[EventSourceConfig] = member(shape=EventSourceConfig)

    def with_trigger_enable(self, trigger_enable: bool) -> "EventBridgeTriggerConfig":
        return self._replace(trigger_enable=trigger_enable)

    def with_async_invocation_type(self, async_invocation_type: bool) -> "EventBridgeTriggerConfig":
        return self._replace(async_invocation_type=async_invocation_type)

    def with_event_rule_filter_pattern(self, pattern: str) -> "EventBridgeTriggerConfig":
        return self._replace(event_rule_filter_pattern=pattern)

    def with_event_source_config(
        self, event_source_config: EventSourceConfig
    ) -> "EventBridgeTriggerConfig":
        return self._replace(event_source_config=event_source_config)


@dataclasses.dataclass(frozen=True)
class UnknownTriggerConfig(TriggerConfig):
    """
    Configuration of a trigger type without a class of its own (``timer``, ``mns_topic``, ``cdn_events``, ...).
    The document is kept as returned by the service and sent back unchanged.
    """

    trigger_type: Optional[str] = None
    document: Dict[str, Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.document)


TRIGGER_CONFIG_TYPES: Dict[str, Type[TriggerConfig]] = {
    cls.trigger_type: cls
    for cls in (OSSTriggerConfig, LogTriggerConfig, HTTPTriggerConfig, EventBridgeTriggerConfig)
}


def parse_trigger_config(trigger_type: str, data: Optional[Dict[str, Any]]) -> Optional[TriggerConfig]:
    """
    Decodes the configuration document of a trigger. Documents of trigger types without a registered class are
    wrapped in an ``UnknownTriggerConfig``.

    :param trigger_type: the type of the trigger, e.g. ``oss``, ``log``, ``http`` or ``eventbridge``
    :param data: the ``triggerConfig`` document
    :return: the configuration of the trigger, or None if there is no document
    :raises TriggerTypeMismatchError: if the document is not an object
    """
    if data is None:
        return None
    if not isinstance(data, dict):
        raise TriggerTypeMismatchError(
            f"Configuration of {trigger_type} trigger must be an object, got {type(data).__name__}"
        )
    config_cls = TRIGGER_CONFIG_TYPES.get(trigger_type)
    if config_cls is None:
        return UnknownTriggerConfig(trigger_type=trigger_type, document=dict(data))
    return config_cls.from_dict(data)


@dataclasses.dataclass(frozen=True)
class TriggerMetadata(Shape):
    trigger_id: Optional[str] = None
    trigger_name: Optional[str] = None
    description: Optional[str] = None
    trigger_type: Optional[str] = None
    source_arn: Optional[str] = None
    invocation_role: Optional[str] = None
    qualifier: Optional[str] = None
    trigger_config: Optional[TriggerConfig] = None
    created_time: Optional[str] = None
    last_modified_time: Optional[str] = None

    @classmethod
    def from_dict(cls, data, **kwargs):
        data = data or {}
        if "trigger_config" not in kwargs and data.get("triggerConfig") is not None:
            kwargs["trigger_config"] = parse_trigger_config(
                data.get("triggerType"), data["triggerConfig"]
            )
        return super().from_dict(data, **kwargs)

    def get_trigger_config(self, expected_cls: Type[C]) -> C:
        """
        Returns the configuration of the trigger as an instance of the given class.

        :param expected_cls: the configuration class the caller expects, e.g. ``OSSTriggerConfig``
        :return: the configuration
        :raises TriggerTypeMismatchError: if the trigger has no configuration of that class
        """
        if not isinstance(self.trigger_config, expected_cls):
            raise TriggerTypeMismatchError(
                f"Trigger {self.trigger_name} of type {self.trigger_type} has no {expected_cls.__name__}"
            )
        return self.trigger_config


@dataclasses.dataclass(frozen=True)
class _TriggerAttributesInput(RequestInput):
    _: dataclasses.KW_ONLY
    description: Optional[str] = None
    invocation_role: Optional[str] = None
    qualifier: Optional[str] = None
    trigger_config: Optional[TriggerConfig] = None

    def with_description(self, description: str):
        return self._replace(description=description)

    def with_invocation_role(self, invocation_role: str):
        return self._replace(invocation_role=invocation_role)

    def with_qualifier(self, qualifier: str):
        return self._replace(qualifier=qualifier)

    def with_trigger_config(self, trigger_config: TriggerConfig):
        return self._replace(trigger_config=trigger_config)


@dataclasses.dataclass(frozen=True)
class CreateTriggerInput(_TriggerAttributesInput):
    """
    Creates a trigger. If no trigger type is set, it is taken from the configuration.
    """

    http_method = "POST"
    request_uri = "/services/{service_name}/functions/{function_name}/triggers"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    trigger_name: Optional[str] = member(default=None, kw_only=True)
    trigger_type: Optional[str] = member(default=None, kw_only=True)
    source_arn: Optional[str] = member(default=None, kw_only=True)

    def with_trigger_name(self, trigger_name: str) -> "CreateTriggerInput":
        return self._replace(trigger_name=trigger_name)

    def with_trigger_type(self, trigger_type: str) -> "CreateTriggerInput":
        return self._replace(trigger_type=trigger_type)

    def with_source_arn(self, source_arn: str) -> "CreateTriggerInput":
        return self._replace(source_arn=source_arn)

    def to_dict(self) -> Dict[str, Any]:
        document = super().to_dict()
        if self.trigger_config is None:
            return document
        config_type = self.trigger_config.trigger_type
        if self.trigger_type is None:
            if config_type is not None:
                document["triggerType"] = config_type
        elif config_type is not None and self.trigger_type != config_type:
            raise TriggerTypeMismatchError(
                f"Trigger type {self.trigger_type} does not match "
                f"{type(self.trigger_config).__name__} ({config_type})"
            )
        return document


@dataclasses.dataclass(frozen=True)
class CreateTriggerOutput(TriggerMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class GetTriggerInput(RequestInput):
    request_uri = "/services/{service_name}/functions/{function_name}/triggers/{trigger_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    trigger_name: str = member(location=LOCATION_URI)


@dataclasses.dataclass(frozen=True)
class GetTriggerOutput(TriggerMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class UpdateTriggerInput(_TriggerAttributesInput):
    """
    Updates a trigger. Only the set fields are sent, the service keeps the current value of all others,
    including the unset members of a partial configuration.
    """

    http_method = "PUT"
    request_uri = "/services/{service_name}/functions/{function_name}/triggers/{trigger_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    trigger_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "UpdateTriggerInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class UpdateTriggerOutput(TriggerMetadata, ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class DeleteTriggerInput(RequestInput):
    http_method = "DELETE"
    request_uri = "/services/{service_name}/functions/{function_name}/triggers/{trigger_name}"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)
    trigger_name: str = member(location=LOCATION_URI)
    if_match: Optional[str] = member(name=HEADER_IF_MATCH, location=LOCATION_HEADER, kw_only=True)

    def with_if_match(self, etag: str) -> "DeleteTriggerInput":
        return self._replace(if_match=etag)


@dataclasses.dataclass(frozen=True)
class DeleteTriggerOutput(ResponseOutput):
    pass


@dataclasses.dataclass(frozen=True)
class ListTriggersInput(ListInput):
    request_uri = "/services/{service_name}/functions/{function_name}/triggers"

    service_name: str = member(location=LOCATION_URI)
    function_name: str = member(location=LOCATION_URI)


@dataclasses.dataclass(frozen=True)
class ListTriggersOutput(ResponseOutput):
    triggers: List[TriggerMetadata] = member(shape=TriggerMetadata, default_factory=list)
    next_token: Optional[str] = None
