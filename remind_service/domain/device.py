from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from remind_service.domain.errors import EmptyDeliveryTokenError, EmptyDeviceIDError, EmptyDevicesError


@dataclass(frozen=True, slots=True)
class Device:
    device_id: str
    delivery_token: str

    def __post_init__(self) -> None:
        if not self.device_id:
            raise EmptyDeviceIDError()
        if not self.delivery_token:
            raise EmptyDeliveryTokenError()

    def to_dict(self) -> dict[str, str]:
        return {"device_id": self.device_id, "delivery_token": self.delivery_token}


@dataclass(frozen=True, slots=True)
class Devices:
    items: tuple[Device, ...]

    def __post_init__(self) -> None:
        if not self.items:
            raise EmptyDevicesError()

    @classmethod
    def of(cls, devices: Iterable[Device]) -> Devices:
        return cls(tuple(devices))

    def __iter__(self) -> Iterator[Device]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_list(self) -> list[dict[str, str]]:
        return [device.to_dict() for device in self.items]
