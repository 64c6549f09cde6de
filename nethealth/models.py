from __future__ import annotations

from typing import List

from pydantic import AnyHttpUrl, BaseModel, Field, model_validator


class ProbeSettings(BaseModel):
    count: int = Field(default=2, ge=1)
    timeout_s: float = Field(default=2, gt=0)


class Thresholds(BaseModel):
    warn_ms: int = Field(default=800, ge=0)
    fail_ms: int = Field(default=2000, ge=1)

    @model_validator(mode="after")
    def _warn_below_fail(self) -> "Thresholds":
        if self.warn_ms >= self.fail_ms:
            raise ValueError(
                f"warn_ms ({self.warn_ms}) must be lower than fail_ms ({self.fail_ms})"
            )
        return self


class GatewayConfig(BaseModel):
    probe: ProbeSettings = ProbeSettings()


class DnsConfig(BaseModel):
    test_domain: str = Field(default="example.com", min_length=1)
    resolv_conf: str = "/etc/resolv.conf"
    timeout_s: float = Field(default=5, gt=0)


class PingConfig(BaseModel):
    targets: List[str] = Field(
        default_factory=lambda: ["1.1.1.1", "8.8.8.8"], min_length=2
    )
    probe: ProbeSettings = ProbeSettings()


class HttpConfig(BaseModel):
    targets: List[AnyHttpUrl] = Field(
        default_factory=lambda: [
            "https://www.google.com",
            "https://www.cloudflare.com",
        ],
        min_length=1,
        validate_default=True,
    )
    timeout_s: float = Field(default=5, gt=0)
    thresholds: Thresholds = Thresholds()


class HealthConfig(BaseModel):
    gateway: GatewayConfig = GatewayConfig()
    dns: DnsConfig = DnsConfig()
    ping: PingConfig = PingConfig()
    http: HttpConfig = HttpConfig()
