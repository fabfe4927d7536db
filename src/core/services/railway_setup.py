"""Railway automation.

Links the current directory to a Railway project, adds the managed Postgres
and Redis plugins and pushes the environment variables every Postiz service
needs. Unlike the VPS flow, most steps here tolerate failure: an existing
database or a rejected variable is reported and the run continues.
"""

from __future__ import annotations

from dataclasses import dataclass

from adapters.railway_cli import RailwayCLI
from core.config import DeploySettings
from core.credentials import generate_jwt_secret
from core.domain.models import RailwayServicePlan, RailwaySetupResult
from core.services.hooks import PipelineHooks

FRONTEND_PLACEHOLDER_URL = "https://postiz-frontend-production.up.railway.app"
BACKEND_PLACEHOLDER_URL = "https://postiz-backend-production.up.railway.app"


@dataclass(frozen=True)
class VariableGroups:
    core: list[str]
    urls: list[str]
    storage: list[str]


def build_variable_groups(jwt_secret: str, settings: DeploySettings | None = None) -> VariableGroups:
    settings = settings or DeploySettings()
    return VariableGroups(
        core=[
            "NODE_ENV=production",
            "NODE_OPTIONS=--max-old-space-size=2048",
            f"JWT_SECRET={jwt_secret}",
        ],
        # Placeholders until Railway assigns real domains.
        urls=[
            f"FRONTEND_URL={FRONTEND_PLACEHOLDER_URL}",
            f"NEXT_PUBLIC_BACKEND_URL={BACKEND_PLACEHOLDER_URL}",
            f"BACKEND_INTERNAL_URL=http://localhost:{settings.backend_port}",
        ],
        storage=[
            "STORAGE_PROVIDER=local",
            "UPLOAD_DIRECTORY=/app/uploads",
            "NEXT_PUBLIC_UPLOAD_STATIC_DIRECTORY=/uploads",
        ],
    )


def build_service_plans(groups: VariableGroups) -> list[RailwayServicePlan]:
    """Which variable groups each Railway service receives, in push order."""

    return [
        RailwayServicePlan(name="postiz-backend", variables=groups.core + groups.urls + groups.storage),
        RailwayServicePlan(name="postiz-frontend", variables=groups.core + groups.urls),
        RailwayServicePlan(name="postiz-workers", variables=groups.core + groups.storage),
        RailwayServicePlan(name="postiz-cron", variables=list(groups.core)),
        RailwayServicePlan(name="postiz-command", variables=list(groups.core)),
        RailwayServicePlan(name="postiz-extension", variables=list(groups.core)),
    ]


def setup_railway(
    railway: RailwayCLI,
    *,
    settings: DeploySettings | None = None,
    hooks: PipelineHooks | None = None,
    jwt_secret: str | None = None,
) -> RailwaySetupResult:
    hooks = hooks or PipelineHooks()
    jwt_secret = jwt_secret or generate_jwt_secret()
    result = RailwaySetupResult(jwt_secret=jwt_secret)

    hooks.emit_status(f"Generated secure JWT secret: {jwt_secret}")

    hooks.emit_status("Logging into Railway...")
    if not railway.is_logged_in():
        hooks.emit_warning("Please login to Railway first:")
        railway.login()

    hooks.emit_status("Linking to Railway project...")
    railway.link()

    for label, kind in (("PostgreSQL", "postgresql"), ("Redis", "redis")):
        hooks.emit_status(f"Adding {label} database...")
        if not railway.add_database(kind):
            message = f"{label} database may already exist"
            hooks.emit_warning(message)
            result.warnings.append(message)

    hooks.emit_status("Setting up environment variables...")
    plans = build_service_plans(build_variable_groups(jwt_secret, settings))
    for plan in plans:
        hooks.emit_status(f"Configuring {plan.name} service...")
        hooks.emit_status(f"Setting variables for {plan.name}...")
        for assignment in plan.variables:
            if not railway.set_variable(plan.name, assignment):
                key = assignment.split("=", 1)[0]
                message = f"Failed to set {key} for {plan.name}"
                hooks.emit_error(message)
                result.errors.append(message)
    result.services = plans

    hooks.emit_status("Deploying all services...")
    result.deployed = railway.up_detached()
    if not result.deployed:
        hooks.emit_error("Deployment failed")
        result.errors.append("Deployment failed")
    else:
        hooks.emit_success("Railway setup completed!")
    return result
