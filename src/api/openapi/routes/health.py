"""Health check endpoints."""

from enum import Enum

from fastapi import APIRouter
from pydantic import BaseModel, Field

from src.api.dependencies import FactoryDep, SettingsDep
from src.commons.infrastructure.blob.base import HealthStatus as ProviderHealth
from src.infrastructure.factory import InfrastructureFactory

router = APIRouter()


class HealthStatus(str, Enum):
    """Health check status."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status of a single component."""

    name: str = Field(description="Component name")
    status: HealthStatus = Field(description="Component health status")
    message: str | None = Field(default=None, description="Additional details")
    latency_ms: float | None = Field(default=None, description="Probe latency")


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(description="Overall health status")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    components: list[ComponentHealth] = Field(
        default_factory=list,
        description="Individual component health",
    )


class LivenessResponse(BaseModel):
    """Simple liveness response."""

    status: str = Field(default="ok")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(description="Whether the service is ready to accept requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


def _component(name: str, probe: ProviderHealth) -> ComponentHealth:
    return ComponentHealth(
        name=name,
        status=HealthStatus.HEALTHY if probe.healthy else HealthStatus.UNHEALTHY,
        message=probe.message,
        latency_ms=round(probe.latency_ms, 2),
    )


async def _probe_all(factory: InfrastructureFactory) -> dict[str, ProviderHealth]:
    return {
        "object_store": await factory.get_blob_storage().health_check(),
        "metadata_store": await factory.get_video_repository().health_check(),
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Get overall health status of the service and its components.",
)
async def health_check(
    settings: SettingsDep,
    factory: FactoryDep,
) -> HealthResponse:
    """Check health of all service components."""
    probes = await _probe_all(factory)
    components = [_component(name, probe) for name, probe in probes.items()]

    unhealthy_count = sum(1 for c in components if c.status == HealthStatus.UNHEALTHY)
    if unhealthy_count == 0:
        overall_status = HealthStatus.HEALTHY
    elif unhealthy_count < len(components):
        overall_status = HealthStatus.DEGRADED
    else:
        overall_status = HealthStatus.UNHEALTHY

    return HealthResponse(
        status=overall_status,
        version=settings.app.version,
        environment=settings.app.environment,
        components=components,
    )


@router.get(
    "/health/live",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes probes.",
)
async def liveness() -> LivenessResponse:
    """Simple liveness check - just verifies the app is running."""
    return LivenessResponse(status="ok")


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Readiness check for Kubernetes probes.",
)
async def readiness(
    factory: FactoryDep,
) -> ReadinessResponse:
    """Check if service is ready to accept requests.

    Verifies both stores answer.
    """
    probes = await _probe_all(factory)
    checks = {name: probe.healthy for name, probe in probes.items()}
    return ReadinessResponse(ready=all(checks.values()), checks=checks)
