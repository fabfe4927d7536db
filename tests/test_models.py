"""Tests for the domain models."""

import pytest
from pydantic import ValidationError

from core.domain.models import DeploymentTarget


def test_target_derives_api_domain_and_urls():
    target = DeploymentTarget(domain=" Postiz.Example.com ", email="ops@example.com")
    assert target.domain == "postiz.example.com"
    assert target.api_domain == "api.postiz.example.com"
    assert target.frontend_url == "https://postiz.example.com"
    assert target.backend_url == "https://api.postiz.example.com"


@pytest.mark.parametrize("domain", ["", "https://postiz.example.com", "postiz.example.com/app", "-bad.com"])
def test_target_rejects_invalid_domains(domain):
    with pytest.raises(ValidationError):
        DeploymentTarget(domain=domain, email="ops@example.com")


@pytest.mark.parametrize("email", ["", "ops", "@example.com", "ops@"])
def test_target_rejects_invalid_emails(email):
    with pytest.raises(ValidationError):
        DeploymentTarget(domain="postiz.example.com", email=email)
