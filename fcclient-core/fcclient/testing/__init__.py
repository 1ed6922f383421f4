"""Utilities to test code that uses fc-client: an in-memory FC emulator and pytest fixtures."""
from fcclient.api.triggers import EventSourceType


def eventbridge_trigger_source_arn(
    region: str,
    account_id: str,
    service_name: str,
    function_name: str,
    trigger_name: str,
    event_source_type: str,
) -> str:
    """
    Returns the ARN of the event rule that backs an EventBridge trigger. Triggers with the ``Default`` event source
    use the default event bus, all others get a bus of their own.

    :param region: the region of the trigger
    :param account_id: the account owning the trigger
    :param service_name: the service of the function
    :param function_name: the function of the trigger
    :param trigger_name: the trigger
    :param event_source_type: the event source type (``Default``, ``MNS``, ``RocketMQ`` or ``RabbitMQ``)
    :return: the ARN ``acs:eventbridge:<region>:<account>:eventbus/<bus>/rule/<rule>``
    """
    if event_source_type == EventSourceType.Default:
        event_bus = "default"
    else:
        event_bus = f"{event_source_type}-{function_name}-{trigger_name}"
    event_rule = f"{service_name}-{function_name}-{trigger_name}"
    return f"acs:eventbridge:{region}:{account_id}:eventbus/{event_bus}/rule/{event_rule}"


def service_arn(region: str, account_id: str, service_name: str) -> str:
    return f"acs:fc:{region}:{account_id}:services/{service_name}"
