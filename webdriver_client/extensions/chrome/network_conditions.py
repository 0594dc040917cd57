from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...errors import DecodeError


@dataclass
class NetworkConditions:
    """Emulated network conditions for a Chromium session.

    Throughput is in bytes/second, latency in milliseconds. Values are passed
    through as-is; the browser validates them.
    """

    offline: bool = False
    latency: int = 0
    download_throughput: int = -1
    upload_throughput: int = -1

    def to_json(self) -> dict[str, Any]:
        return {
            "offline": self.offline,
            "latency": self.latency,
            "download_throughput": self.download_throughput,
            "upload_throughput": self.upload_throughput,
        }

    @classmethod
    def from_json(cls, data: Any) -> NetworkConditions:
        if not isinstance(data, dict):
            raise DecodeError(f"network conditions must be a JSON object, got {type(data).__name__}")
        try:
            offline = data.get("offline", False)
            if not isinstance(offline, bool):
                raise TypeError("offline must be a boolean")
            return cls(
                offline=offline,
                latency=int(data.get("latency", 0)),
                download_throughput=int(data.get("download_throughput", -1)),
                upload_throughput=int(data.get("upload_throughput", -1)),
            )
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"network conditions: {exc}") from exc


__all__ = ["NetworkConditions"]
