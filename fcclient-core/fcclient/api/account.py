import dataclasses
from typing import List, Optional

from .core import RequestInput, ResponseOutput, member


@dataclasses.dataclass(frozen=True)
class GetAccountSettingsInput(RequestInput):
    request_uri = "/account-settings"


@dataclasses.dataclass(frozen=True)
class GetAccountSettingsOutput(ResponseOutput):
    available_azs: Optional[List[str]] = member(name="availableAZs")
